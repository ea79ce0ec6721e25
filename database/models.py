"""SQLAlchemy ORM models for the coaching service.

Tables cover users and their client profiles, the food catalogue, nutrition
and training plans, body measurements and progress records, group nutrition
sessions, reminders and notifications, nutrition follow-ups and the supplement,
exercise video and guide libraries. Models stay behavior-free; list and
nested fields are stored as JSON-encoded text and decoded in the services.
"""

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()


class User(Base):
    """Account of anyone using the application: staff or client."""

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    role = Column(String, nullable=False)  # nutritionist | trainer | client | admin
    created_at = Column(DateTime, default=datetime.utcnow)


class Client(Base):
    """Coaching profile of a client user: body data, goals and medical history."""

    __tablename__ = "clients"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    nutritionist_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    birth_date = Column(Date, nullable=True)
    gender = Column(String, nullable=True)
    height = Column(Float, nullable=True)
    weight = Column(Float, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    activity_level = Column(String, nullable=False, default="moderate")
    weight_goal = Column(String, nullable=False, default="maintain")
    target_weight = Column(Float, nullable=True)
    dietary_preferences = Column(Text, nullable=True)
    medical_conditions = Column(Text, nullable=True)
    allergies = Column(Text, nullable=True)
    medications = Column(Text, nullable=True)
    dietary_restrictions = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Food(Base):
    """Reference nutritional facts for one food item per serving size."""

    __tablename__ = "foods"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    category = Column(String, nullable=False)
    calories = Column(Float, nullable=False)
    protein = Column(Float, nullable=False)
    carbs = Column(Float, nullable=False)
    fat = Column(Float, nullable=False)
    fiber = Column(Float, nullable=True)
    sugar = Column(Float, nullable=True)
    sodium = Column(Float, nullable=True)
    serving_size = Column(Float, nullable=False)
    serving_unit = Column(String, nullable=False, default="g")
    description = Column(Text, nullable=True)
    restrictions = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class NutritionPlan(Base):
    """Client-scoped, date-ranged nutrition plan authored by a nutritionist.

    `daily_plans` holds the JSON-encoded list of days with their meals. Any
    totals stored inside it are a cache and get recomputed on read and write.
    """

    __tablename__ = "nutrition_plans"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    nutritionist_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    daily_plans = Column(Text, nullable=False, default="[]")
    nutrient_goals = Column(Text, nullable=True)
    hydration = Column(Text, nullable=True)
    supplements = Column(Text, nullable=True)
    restrictions = Column(Text, nullable=True)
    preferences = Column(Text, nullable=True)
    allergies = Column(Text, nullable=True)
    objectives = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TrainingPlan(Base):
    """Trainer-authored routine plan for a client."""

    __tablename__ = "training_plans"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="draft")  # active | completed | draft
    routines = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BodyMeasurement(Base):
    """Dated body measurement; BMI is derived from weight and height on save."""

    __tablename__ = "body_measurements"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    weight = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    bmi = Column(Float, nullable=True)
    chest = Column(Float, nullable=True)
    waist = Column(Float, nullable=True)
    hips = Column(Float, nullable=True)
    arms = Column(Float, nullable=True)
    thighs = Column(Float, nullable=True)
    body_fat = Column(Float, nullable=True)
    muscle_mass = Column(Float, nullable=True)
    visceral_fat = Column(Float, nullable=True)
    basal_metabolic_rate = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ProgressRecord(Base):
    """Lightweight weight/circumference check-in logged for a client."""

    __tablename__ = "progress_records"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    weight = Column(Float, nullable=True)
    measurements = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class NutritionSession(Base):
    """Scheduled group session run by a nutritionist."""

    __tablename__ = "nutrition_sessions"
    id = Column(Integer, primary_key=True, index=True)
    nutritionist_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    start_datetime = Column(DateTime, nullable=False)
    end_datetime = Column(DateTime, nullable=False)
    meeting_link = Column(String, nullable=True)
    max_patients = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default="scheduled")  # scheduled | completed | cancelled
    patients = Column(Text, nullable=False, default="[]")  # client ids
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Reminder(Base):
    """User-authored reminder, optionally about a specific client."""

    __tablename__ = "reminders"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="general")  # session | meal | workout | general
    reminder_at = Column(DateTime, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class Notification(Base):
    """In-app notification shown to a single user."""

    __tablename__ = "notifications"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reminder_id = Column(Integer, ForeignKey("reminders.id"), nullable=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="general")
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class NutritionFollowUp(Base):
    """Check-in recorded against a client's nutrition plan."""

    __tablename__ = "nutrition_follow_ups"
    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("nutrition_plans.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    mood = Column(String, nullable=False)  # good | normal | bad
    weight = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    completed_meals = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Supplement(Base):
    """Catalogue entry for a supplement that plans can prescribe."""

    __tablename__ = "supplements"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    instructions = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ExerciseVideo(Base):
    """Linked exercise demonstration video shared by a trainer."""

    __tablename__ = "exercise_videos"
    id = Column(Integer, primary_key=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(String, nullable=False)
    thumbnail_url = Column(String, nullable=True)
    difficulty = Column(String, nullable=False, default="beginner")  # beginner | intermediate | advanced
    muscle_group = Column(String, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Guide(Base):
    """Downloadable guide published by staff; the file itself lives elsewhere."""

    __tablename__ = "guides"
    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    file_url = Column(String, nullable=False)
    file_size = Column(String, nullable=True)
    download_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
