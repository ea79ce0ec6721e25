"""Utilities to ingest food catalogue CSV files into the application's database.

This module provides:
- parse_foods_csv(source): returns a list of normalized food dicts
- seed_foods_from_csv(source, session): idempotently adds the parsed foods

The CSV must carry `name`, `category`, `calories`, `protein`, `carbs`, `fat`
and `serving_size` columns. `fiber`, `sugar`, `sodium`, `serving_unit`,
`description` and a `restrictions` column (tags separated by `;` or `|`) are
optional. `source` may be a path or any file-like object pandas can read.
"""
from __future__ import annotations

from typing import Dict, List
import json
import math
import pandas as pd

from database.database import WriteSessionLocal
from database import models
from core.exceptions import ValidationError
from core.logger import get_logger

logger = get_logger("data.ingest_foods")

REQUIRED_COLUMNS = ("name", "category", "calories", "protein", "carbs", "fat", "serving_size")
OPTIONAL_NUMBERS = ("fiber", "sugar", "sodium")


def _number(val):
    """Return a finite float for a CSV cell, or None for blanks and junk."""
    if val is None:
        return None
    try:
        num = float(str(val).strip())
    except ValueError:
        return None
    return num if math.isfinite(num) else None


def _text(val):
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return None
    text = str(val).strip()
    return text or None


def _tags(val) -> List[str]:
    text = _text(val)
    if not text:
        return []
    return sorted({t.strip().lower() for t in text.replace("|", ";").split(";") if t.strip()})


def parse_foods_csv(source) -> List[Dict]:
    """Parse the CSV and return a list of normalized food dictionaries.

    Rows without a name, with a missing or negative nutrient, or with a
    non-positive serving size are skipped with a warning.

    Raises:
        ValidationError: If a required column is absent or the CSV is unreadable.
    """
    logger.info("Parsing foods CSV: %s", getattr(source, "name", source))
    try:
        df = pd.read_csv(source, encoding="utf-8", engine="python", dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Could not read foods CSV: {exc}", field="file")
    df = df.rename(columns=lambda s: s.strip().lower())
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError(f"Foods CSV is missing columns: {', '.join(missing)}", field="file")

    foods = []
    for index, row in df.iterrows():
        name = _text(row.get("name"))
        category = _text(row.get("category"))
        if not name or not category:
            logger.warning("Skipping row %s: name and category are required", index + 2)
            continue

        values = {c: _number(row.get(c)) for c in ("calories", "protein", "carbs", "fat", "serving_size")}
        if any(v is None or v < 0 for v in values.values()) or values["serving_size"] <= 0:
            logger.warning("Skipping '%s': invalid nutrient values %s", name, values)
            continue

        food = {"name": name, "category": category.lower(), **values}
        for col in OPTIONAL_NUMBERS:
            val = _number(row.get(col)) if col in df.columns else None
            food[col] = val if val is not None and val >= 0 else None
        food["serving_unit"] = _text(row.get("serving_unit")) or "g"
        food["description"] = _text(row.get("description"))
        food["restrictions"] = _tags(row.get("restrictions"))
        foods.append(food)

    logger.info("Parsed %s foods from CSV", len(foods))
    return foods


def seed_foods_from_csv(source, session=None) -> Dict[str, int]:
    """Idempotently add the CSV's foods to the catalogue.

    If `session` is not supplied, a `WriteSessionLocal` session is used.
    Existing foods are matched by name (case-insensitively) and skipped.

    Returns:
        Dictionary with 'added' (count of new foods) and 'total' (catalogue size).
    """
    close_session = False
    if session is None:
        session = WriteSessionLocal()
        close_session = True
    try:
        parsed = parse_foods_csv(source)
        known = {name.lower() for (name,) in session.query(models.Food.name).all()}
        added = 0
        for item in parsed:
            if item["name"].lower() in known:
                continue
            session.add(models.Food(**{**item, "restrictions": json.dumps(item["restrictions"])}))
            known.add(item["name"].lower())
            added += 1
        if added:
            session.commit()
        total = session.query(models.Food).count()
        logger.info("Seeded %s new foods into DB (catalogue size %s)", added, total)
        return {"added": added, "total": total}
    finally:
        if close_session:
            session.close()


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser("Seed foods from CSV into the DB")
    p.add_argument("csv_path", nargs="?", default="data/fixtures/foods.csv")
    args = p.parse_args()
    result = seed_foods_from_csv(args.csv_path)
    print(f"Added {result['added']} foods ({result['total']} in catalogue)")
