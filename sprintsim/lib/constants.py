"""Shared constants for the simulation.

Balance defaults live here; BalanceConfig (lib/config.py) can override
most of them from balance.env.
"""

# Clock
TICK_INTERVAL_MS = 800
MAX_CATCHUP_TICKS = 10  # Anti spiral-of-death cap per host frame

# Calendar
TICKS_PER_DAY = 8
DEFAULT_SPRINT_DAYS = 10
PLANNING_DAYS = 1

# Team
BASE_DEVELOPER_VELOCITY = 0.5
MAX_TEAM_SIZE = 4
STARTING_CASH = 0
CANDIDATES_PER_BATCH = 3
CANDIDATE_ARCHETYPE_RETRIES = 10

# Allocation
WIP_PENALTY_PER_EXCESS = 0.15
WIP_PENALTY_FLOOR = 0.40
MOMENTUM_MULTIPLIER = 1.20
MOMENTUM_TICKS = 6

# Disruptions
BLOCKER_SPAWN_CHANCE_PER_TICK = 0.04
MAX_ACTIVE_BLOCKERS = 3
BLOCKER_STORY_POINTS = 0
BLOCKER_TOAST = "Blocker! All work is frozen!"
EARLY_SHIP_TOAST = "All stories done! Ship early for a bonus."

# Payout
CONTRACT_PAYOUT_CURVE = 1.3  # 100% -> 100%, 80% -> ~75%, 60% -> ~51%
PERFECT_COMPLETION_BONUS = 0.25  # Fraction of curved cash
EARLY_DELIVERY_BONUS_PER_DAY = 0.05  # Fraction of base payout

# Ranked top-down; anything below the last band is F
GRADE_THRESHOLDS = [
    ("S", 1.0),
    ("A", 0.8),
    ("B", 0.6),
    ("C", 0.4),
    ("D", 0.2),
]
FALLBACK_GRADE = "F"

# Contract generation (inclusive ranges)
STORY_POINT_RANGE = (1, 5)
STORIES_PER_CONTRACT_RANGE = (12, 18)
SPRINTS_PER_CONTRACT_RANGE = (2, 4)
CONTRACT_PAYOUT_RANGE = (2000, 6000)

STORY_TITLES = [
    "Implement Login API",
    "Build Dashboard UI",
    "Add Payment Gateway",
    "Fix Database Schema",
    "Create User Profile Page",
    "Set Up CI/CD Pipeline",
    "Write Unit Tests",
    "Optimize Image Loading",
    "Add Push Notifications",
    "Refactor Auth Module",
    "Build Search Feature",
    "Add Dark Mode Toggle",
    "Implement Caching Layer",
    "Create Admin Panel",
    "Set Up Analytics",
    "Build Onboarding Flow",
    "Add Export to CSV",
    "Implement WebSocket Chat",
    "Build Settings Page",
    "Add Multi-language Support",
]

BLOCKER_TITLES = [
    "Merge Conflict!",
    "Server Down!",
    "Dependency Vulnerability",
    "API Rate Limit Hit",
    "Database Migration Failed",
    "Build Pipeline Broken",
    "Memory Leak Detected",
    "SSL Certificate Expired",
]

CLIENT_NAMES = [
    "Acme Corp",
    "TechStart Inc",
    "MegaBank Financial",
    "CloudNine Solutions",
    "RetailMax",
    "HealthFirst App",
    "EduLearn Platform",
    "GreenEnergy Co",
    "FoodDash Delivery",
    "TravelWise",
]

STARTER_DEVELOPER_NAME = "Alex the Intern"
