"""Content-based food substitution suggestions.

Vectorizes catalogue foods by nutrient density (calories, protein, carbs and
fat per unit of serving) plus binary restriction tags, then ranks foods by
cosine similarity so a nutritionist can swap an item in a plan for one with
a comparable profile.
"""

from typing import List, Tuple
from sqlalchemy.orm import Session
from database import models
from core.logger import get_logger
from core.repository import load_json
from services.nutrient_aggregator import scale_factor
import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

logger = get_logger("services.food_recommender")

NUMERIC_FEATURES = ("calories", "protein", "carbs", "fat")


class FoodSimilarityRecommender:
    """Cosine-similarity recommender over nutrient-density vectors.

    Methods
    -------
    _vectorize_foods(foods)
        Convert Food rows into a numeric feature matrix and id list.
    recommend_similar(db, food_id, top_k=5, same_category=False)
        Return (food_id, score) tuples for the top-k most similar foods.
    """

    def __init__(self):
        self.logger = logger

    def _vectorize_foods(self, foods: List[models.Food]):
        """Build the feature matrix for `foods`.

        Each row holds per-unit nutrient values (one unit of the serving
        measure, so 100 g and 50 g servings compare fairly) followed by
        binary restriction tags. Numeric columns are scaled by their max so
        calories do not dominate.

        Returns:
            Tuple[numpy.ndarray, List[int]]: matrix X and the matching ids.
        """
        all_tags = set()
        parsed = []
        for f in foods:
            tags = load_json(f.restrictions, [], "restrictions") or []
            parsed.append((f, tags))
            all_tags.update(tags)

        tag_list = sorted(all_tags)
        features = []
        ids = []
        for (f, tags) in parsed:
            per_unit = scale_factor(1, f.serving_size)
            num_feats = [(getattr(f, name) or 0.0) * per_unit for name in NUMERIC_FEATURES]
            tag_feats = [1.0 if t in tags else 0.0 for t in tag_list]
            features.append(num_feats + tag_feats)
            ids.append(f.id)

        X = np.array(features, dtype=float)
        if X.shape[0] > 0:
            num_cols = len(NUMERIC_FEATURES)
            col_max = X[:, :num_cols].max(axis=0)
            col_max[col_max == 0] = 1.0
            X[:, :num_cols] = X[:, :num_cols] / col_max
        return X, ids

    def recommend_similar(self, db: Session, food_id: int, top_k: int = 5,
                          same_category: bool = False) -> List[Tuple[int, float]]:
        """Return the top-k foods most similar to `food_id`, best first.

        An unknown `food_id` or an empty catalogue yields an empty list.
        With `same_category`, only foods of the same category are ranked.
        """
        query = db.query(models.Food)
        if same_category:
            target = db.get(models.Food, food_id)
            if target is None:
                self.logger.warning("food_id %s not found for similarity", food_id)
                return []
            query = query.filter(models.Food.category == target.category)
        foods = query.all()
        if not foods:
            return []
        X, ids = self._vectorize_foods(foods)
        if food_id not in ids:
            self.logger.warning("food_id %s not found for similarity", food_id)
            return []
        idx = ids.index(food_id)
        row = cosine_similarity(X[idx:idx + 1], X)[0]
        ranked = [(ids[i], float(row[i])) for i in range(len(ids)) if i != idx]
        ranked.sort(key=lambda x: x[1], reverse=True)
        return ranked[:top_k]


food_recommender = FoodSimilarityRecommender()
