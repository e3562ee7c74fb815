from socialpilot.auth import get_password_hash
from socialpilot.database import SessionLocal, engine, Base
from socialpilot.models import Post, User, UserPreferences

# Create tables
Base.metadata.create_all(bind=engine)

db = SessionLocal()

DEMO_EMAIL = "demo@socialpilot.dev"

# Clear existing demo data
existing = db.query(User).filter(User.email == DEMO_EMAIL).first()
if existing:
    db.delete(existing)
    db.commit()

user = User(
    email=DEMO_EMAIL,
    hashed_password=get_password_hash("demo-password"),
    name="Demo Creator",
    niche="tech",
    niches=[
        {"name": "Developer tools", "description": "CLIs and editors", "keywords": ["rust", "cli"]},
    ],
    target_audience="software engineers",
    posting_style="educational",
    past_posts=[
        {"caption": "Five CLI tools I use daily", "likes": 120, "comments": 14, "shares": 9},
        {"caption": "Why we rewrote our build in Rust", "likes": 310, "comments": 41, "shares": 27},
        {"caption": "Friday debugging story", "likes": 64, "comments": 8, "shares": 2},
    ],
    is_onboarded=True,
)
user.preferences = UserPreferences(auto_posting_enabled=False, best_time_to_post="09:30", max_hashtags=5)
user.profile_completeness = user.calculate_profile_completeness()
db.add(user)
db.flush()

# Sample drafts
posts = [
    Post(
        user_id=user.id,
        caption="Cloud bills going up? Three things to check before you scale.",
        hashtags=["#cloud", "#devops", "#finops"],
        trending_topics=["Cloud Computing", "DevOps"],
        ai_metadata={
            "generationModel": "gpt-3.5-turbo",
            "trendingTopicsSources": ["Cloud Computing", "DevOps"],
            "confidenceScore": 0.82,
            "userNiche": "tech",
        },
        status="draft",
    ),
    Post(
        user_id=user.id,
        caption="Memory safety without a garbage collector, explained in one diagram.",
        hashtags=["#rust", "#programming"],
        trending_topics=["rust trends", "Software Development"],
        ai_metadata={
            "generationModel": "gpt-3.5-turbo",
            "trendingTopicsSources": ["rust trends", "Software Development"],
            "confidenceScore": 0.9,
            "userNiche": "tech",
        },
        status="draft",
    ),
]

for post in posts:
    db.add(post)

db.commit()
db.close()

print(f"Database seeded: {DEMO_EMAIL} with {len(posts)} drafts")
