"""Generate a fake marketplace catalog for testing and development.

Writes categories.csv, items.csv, item_images.csv and users.csv in the format
read by ``listingrec.catalog.store.load_catalog_from_csv`` and
``listingrec.catalog.store.load_users_from_csv``.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_catalog.py

    Or import and use programmatically:
        from scripts.generate_fake_catalog import generate_fake_catalog
        categories, items, images, users = generate_fake_catalog(num_items=200)
"""

import argparse
import random
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

# Default configuration constants
DEFAULT_NUM_ITEMS = 300
DEFAULT_MAX_IMAGES = 3
DEFAULT_SEED = 42

CATEGORY_NAMES = [
    "Travel", "Appliance", "Boat", "Book", "Camera", "Car",
    "Clothes", "Computer", "Furniture", "Motorcycle", "Phone", "Art",
]
ADJECTIVES = ["Used", "Like new", "Vintage", "Compact", "Deluxe", "Classic"]
USERS = [
    ("alice@example.com", "alice"),
    ("jakob@mail.com", "jakob"),
    ("maria@example.com", "maria"),
    ("olav@example.com", "olav"),
    ("ingrid@example.com", "ingrid"),
]

# Rough bounding box for Norway
LAT_RANGE = (58.0, 70.0)
LON_RANGE = (5.0, 30.0)


def generate_fake_catalog(
    num_items: int = DEFAULT_NUM_ITEMS,
    max_images: int = DEFAULT_MAX_IMAGES,
    seed: Optional[int] = DEFAULT_SEED,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """Generate synthetic categories, items, item images and users.

    Args:
        num_items: Number of items to create. Must be positive.
        max_images: Maximum images per item (items get 0 to max_images).
        seed: Random seed for reproducibility.

    Returns:
        A tuple of DataFrames (categories, items, images, users).

    Raises:
        ValueError: If num_items is not positive or max_images is negative.
    """
    if num_items <= 0:
        raise ValueError("num_items must be positive")
    if max_images < 0:
        raise ValueError("max_images must not be negative")

    rng = random.Random(seed)

    categories = pd.DataFrame(
        {
            "id": range(1, len(CATEGORY_NAMES) + 1),
            "name": CATEGORY_NAMES,
            "description": [name.lower() for name in CATEGORY_NAMES],
        }
    )
    users = pd.DataFrame(
        {
            "id": range(1, len(USERS) + 1),
            "email": [email for email, _ in USERS],
            "display_name": [name for _, name in USERS],
        }
    )

    items = []
    images = []
    for item_id in range(1, num_items + 1):
        category_id = rng.randint(1, len(CATEGORY_NAMES))
        category_name = CATEGORY_NAMES[category_id - 1]
        seller_id = rng.randint(1, len(USERS))
        items.append({
            "id": item_id,
            "category_id": category_id,
            "brief_description": f"{rng.choice(ADJECTIVES)} {category_name.lower()}",
            "full_description": f"A {category_name.lower()} for sale.",
            "price": round(rng.uniform(50, 20000), 2),
            "seller_id": seller_id,
            "status": "ACTIVE" if rng.random() > 0.05 else "SOLD",
            "latitude": round(rng.uniform(*LAT_RANGE), 4),
            "longitude": round(rng.uniform(*LON_RANGE), 4),
        })

        for position in range(rng.randint(0, max_images)):
            images.append({
                "item_id": item_id,
                "image_url": f"https://img.example.com/items/{item_id}/{position}.jpg",
                "position": position,
            })

    images_df = pd.DataFrame(images, columns=["item_id", "image_url", "position"])
    return categories, pd.DataFrame(items), images_df, users


def main() -> None:
    """Generate a fake catalog and save it under data/."""
    parser = argparse.ArgumentParser(description="Generate a fake catalog")
    parser.add_argument("--num-items", type=int, default=DEFAULT_NUM_ITEMS)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument(
        "--output-dir",
        default=str(Path(__file__).parent.parent / "data"),
    )
    args = parser.parse_args()

    print(f"Generating {args.num_items} fake items...")

    try:
        categories, items, images, users = generate_fake_catalog(
            num_items=args.num_items,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    data_dir = Path(args.output_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    categories.to_csv(data_dir / "categories.csv", index=False)
    items.to_csv(data_dir / "items.csv", index=False)
    images.to_csv(data_dir / "item_images.csv", index=False)
    users.to_csv(data_dir / "users.csv", index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {data_dir}")
    print(f"\nItems per category:")
    print(items.groupby("category_id").size().to_string())
    print(f"\nData summary:")
    print(f"  Categories: {len(categories)}")
    print(f"  Items: {len(items)}")
    print(f"  Images: {len(images)}")
    print(f"  Users: {len(users)}")


if __name__ == '__main__':
    main()
