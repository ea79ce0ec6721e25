"""Pydantic schema package for request and response models."""

from .user_schema import (
    UserCreateRequest,
    UserResponse,
    ClientCreateRequest,
    ClientUpdateRequest,
    ClientResponse,
    ClientTargets,
)
from .food_schema import FoodCreateRequest, FoodUpdateRequest, FoodFact, SimilarFood, FoodImportResponse
from .plan_schema import (
    MealFoodEntry,
    Meal,
    DailyPlan,
    NutritionPlanCreateRequest,
    NutritionPlanUpdateRequest,
    NutritionPlanResponse,
    PlanPreviewRequest,
    PlanPreviewResponse,
)
from .training_schema import TrainingPlanCreateRequest, TrainingPlanUpdateRequest, TrainingPlanResponse
from .measurement_schema import (
    BodyMeasurementRequest,
    BodyMeasurementResponse,
    ProgressRecordRequest,
    ProgressRecordResponse,
    ProgressSummaryResponse,
)
from .session_schema import (
    NutritionSessionCreateRequest,
    NutritionSessionUpdateRequest,
    NutritionSessionResponse,
)
from .notification_schema import (
    ReminderCreateRequest,
    ReminderUpdateRequest,
    ReminderResponse,
    NotificationResponse,
    NotificationListResponse,
    ReminderCheckResponse,
)
from .report_schema import ReportResponse
from .follow_up_schema import CompletedMeal, FollowUpCreateRequest, FollowUpUpdateRequest, FollowUpResponse
from .library_schema import (
    SupplementCreateRequest,
    SupplementUpdateRequest,
    SupplementResponse,
    ExerciseVideoCreateRequest,
    ExerciseVideoUpdateRequest,
    ExerciseVideoResponse,
    GuideCreateRequest,
    GuideUpdateRequest,
    GuideResponse,
)

__all__ = [
    "UserCreateRequest",
    "UserResponse",
    "ClientCreateRequest",
    "ClientUpdateRequest",
    "ClientResponse",
    "ClientTargets",
    "FoodCreateRequest",
    "FoodUpdateRequest",
    "FoodFact",
    "SimilarFood",
    "FoodImportResponse",
    "MealFoodEntry",
    "Meal",
    "DailyPlan",
    "NutritionPlanCreateRequest",
    "NutritionPlanUpdateRequest",
    "NutritionPlanResponse",
    "PlanPreviewRequest",
    "PlanPreviewResponse",
    "TrainingPlanCreateRequest",
    "TrainingPlanUpdateRequest",
    "TrainingPlanResponse",
    "BodyMeasurementRequest",
    "BodyMeasurementResponse",
    "ProgressRecordRequest",
    "ProgressRecordResponse",
    "ProgressSummaryResponse",
    "NutritionSessionCreateRequest",
    "NutritionSessionUpdateRequest",
    "NutritionSessionResponse",
    "ReminderCreateRequest",
    "ReminderUpdateRequest",
    "ReminderResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "ReminderCheckResponse",
    "ReportResponse",
    "CompletedMeal",
    "FollowUpCreateRequest",
    "FollowUpUpdateRequest",
    "FollowUpResponse",
    "SupplementCreateRequest",
    "SupplementUpdateRequest",
    "SupplementResponse",
    "ExerciseVideoCreateRequest",
    "ExerciseVideoUpdateRequest",
    "ExerciseVideoResponse",
    "GuideCreateRequest",
    "GuideUpdateRequest",
    "GuideResponse",
]
