"""Catalog seeding from YAML."""
import logging
import yaml
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Category, Dish, Restaurant, User
from app.services.ordering.models import DishOption
from app.services.ordering.statuses import UserRole

logger = logging.getLogger(__name__)


class SeedUser(BaseModel):
    email: str
    role: UserRole


class SeedCategory(BaseModel):
    name: str
    slug: Optional[str] = None
    cover_img: Optional[str] = None


class SeedDish(BaseModel):
    name: str
    price: float
    description: Optional[str] = None
    photo: Optional[str] = None
    options: List[DishOption] = []


class SeedRestaurant(BaseModel):
    name: str
    owner: str  # Owner email
    address: str = ""
    cover_img: Optional[str] = None
    category: Optional[str] = None  # Category name
    menu: List[SeedDish] = []


class Catalog(BaseModel):
    """Catalog file structure."""

    users: List[SeedUser] = []
    categories: List[SeedCategory] = []
    restaurants: List[SeedRestaurant] = []


class SeedResult(BaseModel):
    """Number of rows created per table."""

    users: int = 0
    categories: int = 0
    restaurants: int = 0
    dishes: int = 0


def load_catalog_file(path: str | Path) -> Catalog:
    """Parse a catalog YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return Catalog.model_validate(data)


async def seed_catalog(db: AsyncSession, catalog: Catalog) -> SeedResult:
    """
    Insert catalog rows that do not exist yet.

    Rows are matched on user email, category name, restaurant name + owner
    and dish name + restaurant, so seeding the same file twice is a no-op.
    """
    result = SeedResult()

    users: Dict[str, User] = {}
    for seed_user in catalog.users:
        user = (
            await db.execute(select(User).where(User.email == seed_user.email))
        ).scalar_one_or_none()
        if user is None:
            user = User(email=seed_user.email, role=seed_user.role.value)
            db.add(user)
            result.users += 1
        users[seed_user.email] = user

    categories: Dict[str, Category] = {}
    for seed_category in catalog.categories:
        category = (
            await db.execute(select(Category).where(Category.name == seed_category.name))
        ).scalar_one_or_none()
        if category is None:
            category = Category(
                name=seed_category.name,
                slug=seed_category.slug or seed_category.name.lower().replace(" ", "-"),
                cover_img=seed_category.cover_img,
            )
            db.add(category)
            result.categories += 1
        categories[seed_category.name] = category

    # Ids are needed to match existing restaurants and dishes
    await db.flush()

    for seed_restaurant in catalog.restaurants:
        owner = users.get(seed_restaurant.owner)
        if owner is None:
            raise ValueError(
                f"Restaurant '{seed_restaurant.name}' references unknown owner {seed_restaurant.owner}"
            )
        if owner.role != UserRole.OWNER.value:
            raise ValueError(f"User {owner.email} is not an Owner")

        restaurant = (
            await db.execute(
                select(Restaurant).where(
                    Restaurant.name == seed_restaurant.name,
                    Restaurant.owner_id == owner.id,
                )
            )
        ).scalar_one_or_none()
        if restaurant is None:
            category = categories.get(seed_restaurant.category) if seed_restaurant.category else None
            restaurant = Restaurant(
                name=seed_restaurant.name,
                address=seed_restaurant.address,
                cover_img=seed_restaurant.cover_img,
                owner_id=owner.id,
                category_id=category.id if category else None,
            )
            db.add(restaurant)
            await db.flush()
            result.restaurants += 1

        for seed_dish in seed_restaurant.menu:
            dish = (
                await db.execute(
                    select(Dish).where(
                        Dish.name == seed_dish.name,
                        Dish.restaurant_id == restaurant.id,
                    )
                )
            ).scalar_one_or_none()
            if dish is None:
                db.add(
                    Dish(
                        name=seed_dish.name,
                        price=seed_dish.price,
                        description=seed_dish.description,
                        photo=seed_dish.photo,
                        restaurant_id=restaurant.id,
                        options=[
                            option.model_dump(exclude_none=True) for option in seed_dish.options
                        ],
                    )
                )
                result.dishes += 1

    await db.commit()
    logger.info(
        f"[CATALOG] Seed complete - users: {result.users}, categories: {result.categories}, "
        f"restaurants: {result.restaurants}, dishes: {result.dishes}"
    )
    return result
