"""Kolkata demo dataset.

``seed_database`` loads heritage sites, restaurants, badges, quests, sample
travellers and reviews. Badge progress is derived from the seeded facts, never
written directly.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from backend.app.db.models import (
    AdminSession,
    Badge,
    CultureSubmission,
    HeritageQuest,
    HeritageSite,
    Restaurant,
    RestaurantReview,
    SiteVisit,
    TravelMatch,
    TripActivity,
    TripPlan,
    User,
    UserBadge,
    UserQuest,
)
from backend.app.gamification.progress import REQUIREMENT_TYPES, refresh_badges
from backend.app.security.passwords import hash_password

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

HERITAGE_SITES = [
    {
        "name": "Victoria Memorial",
        "description": "An iconic marble building built in memory of Queen Victoria. A masterpiece of Indo-Saracenic architecture.",
        "category": "Monument",
        "latitude": 22.5448,
        "longitude": 88.3426,
        "address": "1 Queens Way, Kolkata 700071",
        "entry_fee": 250,
        "opening_hours": "10:00 AM - 6:00 PM",
        "best_time_to_visit": "October to March",
        "historical_significance": "Constructed between 1872-1921, it's a symbol of the British Raj era",
        "image_url": "/victoria-memorial-kolkata.jpg",
        "rating": 4.8,
        "visit_count": 15000,
    },
    {
        "name": "South Park Street Cemetery",
        "description": "Historic cemetery with beautiful marble tombs dating back to 18th-19th centuries.",
        "category": "Cemetery",
        "latitude": 22.5486,
        "longitude": 88.3711,
        "address": "Park Street, Kolkata 700016",
        "entry_fee": 0,
        "opening_hours": "6:00 AM - 6:00 PM",
        "best_time_to_visit": "Early morning or late afternoon",
        "historical_significance": "Hidden tomb featuring in Heritage Quests, dates back to 1787",
        "image_url": "/south-park-street-cemetery-kolkata.jpg",
        "rating": 4.5,
        "visit_count": 8000,
    },
    {
        "name": "St. Paul's Cathedral",
        "description": "Stunning neo-gothic cathedral with beautiful stained glass windows.",
        "category": "Building",
        "latitude": 22.5523,
        "longitude": 88.3676,
        "address": "Cathedral Road, Kolkata 700071",
        "entry_fee": 0,
        "opening_hours": "8:00 AM - 6:00 PM",
        "best_time_to_visit": "During morning prayers",
        "historical_significance": "Oldest cathedral in India, built in the 19th century",
        "image_url": "/st-pauls-cathedral-kolkata.jpg",
        "rating": 4.6,
        "visit_count": 6500,
    },
    {
        "name": "Jorasanko Tagore House",
        "description": "Ancestral home of Rabindranath Tagore, now a museum showcasing his life and works.",
        "category": "Museum",
        "latitude": 22.579,
        "longitude": 88.3661,
        "address": "Jorasanko Lane, Kolkata 700007",
        "entry_fee": 150,
        "opening_hours": "10:30 AM - 5:00 PM",
        "best_time_to_visit": "Tuesday to Sunday",
        "historical_significance": "Home of Bengal's greatest poet and first non-European Nobel laureate",
        "image_url": "/jorasanko-tagore-house-kolkata.jpg",
        "rating": 4.7,
        "visit_count": 5000,
    },
    {
        "name": "Kalighat Temple",
        "description": "Ancient Hindu temple dedicated to Goddess Kali, one of the holiest sites in Bengal.",
        "category": "Temple",
        "latitude": 22.5145,
        "longitude": 88.3515,
        "address": "Kalighat, Kolkata 700026",
        "entry_fee": 0,
        "opening_hours": "5:00 AM - 12:00 PM, 3:00 PM - 9:00 PM",
        "best_time_to_visit": "Early morning",
        "historical_significance": "One of the 51 Shakti Peeths, mentioned in ancient texts",
        "image_url": "/kalighat-temple-kolkata.jpg",
        "rating": 4.4,
        "visit_count": 12000,
    },
    {
        "name": "Indian Museum",
        "description": "India's oldest museum with an extensive collection of art, history, and natural specimens.",
        "category": "Museum",
        "latitude": 22.5445,
        "longitude": 88.3923,
        "address": "27 Chowringhee Road, Kolkata 700071",
        "entry_fee": 500,
        "opening_hours": "10:00 AM - 5:00 PM",
        "best_time_to_visit": "Weekday mornings",
        "historical_significance": "Founded in 1814, houses over 1 million artifacts",
        "image_url": "/indian-museum-kolkata.jpg",
        "rating": 4.5,
        "visit_count": 4500,
    },
]

RESTAURANTS = [
    {
        "name": "Bhim Nag",
        "description": "Traditional Bengali cuisine in a heritage setting near Victoria Memorial.",
        "cuisine_type": ["Bengali", "Indian"],
        "latitude": 22.5448,
        "longitude": 88.3426,
        "address": "Near Victoria Memorial, Kolkata",
        "price_range": "moderate",
        "image_url": "/bhim-nag-restaurant-kolkata.jpg",
        "rating": 4.6,
        "review_count": 234,
        "avg_cost_per_person": 400,
        "specialties": ["Hilsa Fish", "Luchi", "Aloo Posto"],
    },
    {
        "name": "Flury's Tea Room",
        "description": "Iconic establishment on Park Street serving pastries and tea since 1927.",
        "cuisine_type": ["Bakery", "Continental", "Tea"],
        "latitude": 22.5528,
        "longitude": 88.3652,
        "address": "18 Park Street, Kolkata 700016",
        "price_range": "moderate",
        "image_url": "/flurys-tea-room-park-street.jpg",
        "rating": 4.7,
        "review_count": 567,
        "avg_cost_per_person": 300,
        "specialties": ["Belgian Chocolate Cake", "Tea", "Sandwiches"],
    },
    {
        "name": "Peter Cat",
        "description": "Legendary restaurant known for its signature Chelo Kebab and continental cuisine.",
        "cuisine_type": ["Continental", "Indian", "Multi-cuisine"],
        "latitude": 22.553,
        "longitude": 88.367,
        "address": "Park Street, Kolkata 700016",
        "price_range": "luxury",
        "image_url": "/peter-cat-park-street-kolkata.jpg",
        "rating": 4.8,
        "review_count": 789,
        "avg_cost_per_person": 800,
        "specialties": ["Chelo Kebab", "Prawns Koobideh", "Mulligatawny Soup"],
    },
    {
        "name": "Kali Tala",
        "description": "Family-run Bengali restaurant with authentic home-cooked flavors.",
        "cuisine_type": ["Bengali"],
        "latitude": 22.5145,
        "longitude": 88.3515,
        "address": "Near Kalighat, Kolkata 700026",
        "price_range": "budget",
        "image_url": "/kali-tala-restaurant-bengali-kolkata.jpg",
        "rating": 4.5,
        "review_count": 156,
        "avg_cost_per_person": 200,
        "specialties": ["Machher Jhol", "Rice", "Mishti Doi"],
    },
    {
        "name": "Aaheli",
        "description": "Traditional Bengali restaurant in a restored heritage building.",
        "cuisine_type": ["Bengali", "Indian"],
        "latitude": 22.579,
        "longitude": 88.3661,
        "address": "Near Jorasanko, Kolkata 700007",
        "price_range": "moderate",
        "image_url": "/aaheli-restaurant-jorasanko-kolkata.jpg",
        "rating": 4.6,
        "review_count": 312,
        "avg_cost_per_person": 450,
        "specialties": ["Shorshe Ilish", "Chingri Malai Curry", "Payesh"],
    },
]

BADGES = [
    {"name": "The Bhadralok", "description": "Visited 5 heritage sites", "icon_url": "👑", "requirement_type": "visits", "requirement_value": 5},
    {"name": "Heritage Master", "description": "Visited 10 heritage sites", "icon_url": "🏛️", "requirement_type": "visits", "requirement_value": 10},
    {"name": "Culinary Explorer", "description": "Tried 5 different restaurants", "icon_url": "🍽️", "requirement_type": "restaurants", "requirement_value": 5},
    {"name": "Social Butterfly", "description": "Matched with 3 travel companions", "icon_url": "🦋", "requirement_type": "matches", "requirement_value": 3},
    {"name": "Quest Master", "description": "Completed 5 heritage quests", "icon_url": "⚔️", "requirement_type": "quests", "requirement_value": 5},
]

# (site name, quest fields)
QUESTS = [
    (
        "South Park Street Cemetery",
        {
            "name": "Hidden Tomb Mystery",
            "description": "Find the hidden tomb at South Park Street Cemetery to unlock a 10% discount at Flury's Tea Room.",
            "reward_points": 50,
            "reward_discount": 10,
            "difficulty_level": "medium",
            "clue": "Look for the oldest marble structure with intricate carvings near the eastern wall",
        },
    ),
    (
        "Victoria Memorial",
        {
            "name": "Victoria's Secrets",
            "description": "Explore all sections of Victoria Memorial and complete 5 photo challenges.",
            "reward_points": 75,
            "reward_discount": 15,
            "difficulty_level": "hard",
            "clue": "Start from the main entrance and visit the museum galleries",
        },
    ),
    (
        "St. Paul's Cathedral",
        {
            "name": "Cathedral Bells",
            "description": "Attend a service at St. Paul's Cathedral and learn about its architecture.",
            "reward_points": 40,
            "reward_discount": 8,
            "difficulty_level": "easy",
            "clue": "Visit during morning prayers (8:00 AM)",
        },
    ),
]

USERS = [
    {
        "email": "priya@kolkata.com",
        "full_name": "Priya Sharma",
        "avatar_url": "https://api.dicebear.com/7.x/avataaars/svg?seed=Priya",
        "bio": "Love exploring heritage sites and trying authentic Bengali cuisine",
        "age": 26,
        "gender": "Female",
        "interests": ["Heritage", "Photography", "Bengali Cuisine", "Art"],
        "travel_style": "cultural",
        "total_points": 125,
    },
    {
        "email": "vikram@kolkata.com",
        "full_name": "Vikram Patel",
        "avatar_url": "https://api.dicebear.com/7.x/avataaars/svg?seed=Vikram",
        "bio": "Adventure seeker exploring Kolkata's hidden gems",
        "age": 28,
        "gender": "Male",
        "interests": ["Adventure", "History", "Photography", "Food"],
        "travel_style": "adventurous",
        "total_points": 380,
    },
    {
        "email": "sneha@kolkata.com",
        "full_name": "Sneha Gupta",
        "avatar_url": "https://api.dicebear.com/7.x/avataaars/svg?seed=Sneha",
        "bio": "Cultural enthusiast seeking meaningful connections",
        "age": 24,
        "gender": "Female",
        "interests": ["Culture", "Museums", "Bengal Literature", "Spirituality"],
        "travel_style": "cultural",
        "total_points": 200,
    },
    {
        "email": "arjun@kolkata.com",
        "full_name": "Arjun Kumar",
        "avatar_url": "https://api.dicebear.com/7.x/avataaars/svg?seed=Arjun",
        "bio": "Travel blogger documenting Kolkata stories",
        "age": 29,
        "gender": "Male",
        "interests": ["Travel", "Blogging", "Heritage", "Street Food"],
        "travel_style": "cultural",
        "total_points": 450,
    },
]

# (restaurant name, reviewer email, rating, text, dishes)
REVIEWS = [
    ("Bhim Nag", "arjun@kolkata.com", 5, "Authentic Bengali cuisine at its finest. The hilsa fish was perfectly cooked!", ["Hilsa Fish", "Luchi"]),
    ("Flury's Tea Room", "priya@kolkata.com", 5, "A heritage institution! The Belgian Chocolate Cake is to die for.", ["Belgian Chocolate Cake", "Tea"]),
    ("Peter Cat", "vikram@kolkata.com", 5, "Best Chelo Kebab in Kolkata. Worth every penny for the experience.", ["Chelo Kebab"]),
]

# Children before parents
_RESET_ORDER = (
    UserQuest,
    UserBadge,
    SiteVisit,
    TripActivity,
    TripPlan,
    TravelMatch,
    RestaurantReview,
    CultureSubmission,
    HeritageQuest,
    Badge,
    Restaurant,
    HeritageSite,
    User,
    AdminSession,
)


def clear_database(session: Session) -> None:
    """Delete every row from the application tables."""
    for model in _RESET_ORDER:
        session.execute(delete(model))
    session.flush()


def seed_database(session: Session, reset: bool = False) -> dict[str, int]:
    """Load the demo dataset; the caller commits.

    Args:
        session: Open session
        reset: Clear existing data first

    Returns:
        Number of rows created per entity (empty when already seeded)
    """
    if reset:
        clear_database(session)
    elif session.execute(select(func.count()).select_from(HeritageSite)).scalar_one():
        logger.info("Database already seeded; skipping")
        return {}

    sites = {data["name"]: HeritageSite(**data) for data in HERITAGE_SITES}
    restaurants = {data["name"]: Restaurant(**data) for data in RESTAURANTS}
    session.add_all([*sites.values(), *restaurants.values()])
    session.add_all(Badge(**data) for data in BADGES)
    session.flush()

    session.add_all(
        HeritageQuest(heritage_site_id=sites[site_name].site_id, **data)
        for site_name, data in QUESTS
    )

    password_hash = hash_password(DEMO_PASSWORD)
    users = {
        data["email"]: User(password_hash=password_hash, is_solo_traveler=True, **data)
        for data in USERS
    }
    session.add_all(users.values())
    session.flush()

    for restaurant_name, email, rating, text, dishes in REVIEWS:
        session.add(
            RestaurantReview(
                restaurant_id=restaurants[restaurant_name].restaurant_id,
                user_id=users[email].user_id,
                rating=rating,
                text=text,
                dishes_tried=dishes,
            )
        )
    session.flush()

    for user in users.values():
        for requirement_type in REQUIREMENT_TYPES:
            refresh_badges(session, user.user_id, requirement_type)

    counts = {
        "heritage_sites": len(sites),
        "restaurants": len(restaurants),
        "badges": len(BADGES),
        "quests": len(QUESTS),
        "users": len(users),
        "reviews": len(REVIEWS),
    }
    logger.info("Seeded demo dataset: %s", counts)
    return counts
