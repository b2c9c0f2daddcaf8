from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.food_truck import FoodTruck
from app.models.menu import MenuItem, MenuVersion
from app.models.schedule import Schedule

# (truck_id, name, cuisine_tags, price_tier, avg_rating)
DEMO_TRUCKS = [
    ("truck_001", "RU Hungry?", ["American", "Sandwiches"], "$", 4.6),
    ("truck_002", "Grease Trucks Revival", ["American", "Burgers"], "$", 4.4),
    ("truck_003", "Busch Burrito Co.", ["Mexican", "Tacos"], "$$", 4.2),
    ("truck_004", "George St. Slice", ["Italian", "Pizza"], "$$", 4.1),
    ("truck_005", "Curry in a Hurry", ["Indian"], "$$", 4.5),
    ("truck_006", "Livi Lo Mein", ["Chinese", "Noodles"], "$", 3.9),
    ("truck_007", "Cook Campus Crepes", ["French", "Desserts"], "$$", 4.3),
    ("truck_008", "Hub City Halal", ["Halal", "Middle Eastern"], "$", 4.7),
    ("truck_009", "Seoul Food NB", ["Korean", "BBQ"], "$$", 4.4),
    ("truck_010", "Piscataway Pho", ["Vietnamese", "Noodles"], "$$", 4.0),
    ("truck_011", "Scarlet Smash", ["American", "Burgers"], "$$", 4.2),
    ("truck_012", "Green Bowl", ["Vegan", "Salads"], "$$", 4.1),
    ("truck_013", "Knight Bites", ["American", "Sandwiches"], "$", 3.8),
    ("truck_014", "Taqueria Livingston", ["Mexican", "Tacos"], "$", 4.6),
    ("truck_015", "Raritan Roll", ["Japanese", "Sushi"], "$$$", 4.3),
    ("truck_016", "Douglass Dumplings", ["Chinese", "Dumplings"], "$", 4.5),
    ("truck_017", "Falafel Frontier", ["Mediterranean", "Vegan"], "$", 4.2),
    ("truck_018", "Plaza Paninis", ["Italian", "Sandwiches"], "$$", 3.7),
    ("truck_019", "College Ave Cones", ["Desserts", "Ice Cream"], "$", 4.8),
    ("truck_020", "Jersey Jerk", ["Caribbean"], "$$", 4.4),
]

# Типовое меню по первому тегу кухни: (название, цена)
MENU_TEMPLATES = {
    "American": [("Fat Cat", "8.50"), ("Cheesesteak", "9.25"), ("Fries", "3.50")],
    "Mexican": [("Carne Asada Taco", "3.75"), ("Chicken Burrito", "10.50"), ("Horchata", "2.95")],
    "Italian": [("Margherita Slice", "3.25"), ("Chicken Parm Sub", "9.75"), ("Garlic Knots", "4.00")],
    "Indian": [("Chicken Tikka Masala", "11.50"), ("Samosa", "3.00"), ("Mango Lassi", "4.25")],
    "Chinese": [("Lo Mein", "8.95"), ("Pork Dumplings", "6.50"), ("Egg Roll", "2.25")],
    "French": [("Nutella Crepe", "7.50"), ("Ham & Gruyere Crepe", "9.00"), ("Cafe au Lait", "3.50")],
    "Halal": [("Chicken over Rice", "9.00"), ("Lamb Gyro", "8.50"), ("Baklava", "3.00")],
    "Korean": [("Bulgogi Bowl", "12.00"), ("Kimchi Fries", "7.25"), ("Korean Fried Chicken", "10.75")],
    "Vietnamese": [("Beef Pho", "11.25"), ("Banh Mi", "8.75"), ("Spring Rolls", "5.50")],
    "Vegan": [("Quinoa Bowl", "10.25"), ("Kale Caesar", "9.50"), ("Cold Brew", "4.00")],
    "Japanese": [("Spicy Tuna Roll", "9.50"), ("Salmon Poke", "13.75"), ("Miso Soup", "3.25")],
    "Mediterranean": [("Falafel Wrap", "8.25"), ("Hummus Plate", "7.50"), ("Tabbouleh", "5.25")],
    "Desserts": [("Soft Serve", "4.50"), ("Sundae", "6.75"), ("Milkshake", "6.25")],
    "Caribbean": [("Jerk Chicken Plate", "12.50"), ("Beef Patty", "4.25"), ("Plantains", "4.00")],
}

DEMO_SCHEDULE = [
    ("Monday", "11:00", "19:00"),
    ("Wednesday", "11:00", "19:00"),
    ("Friday", "11:00", "23:00"),
]


async def seed_demo_data(db: AsyncSession) -> int:
    """Заполняет пустую базу демонстрационными траками, меню и расписанием.

    Возвращает количество созданных траков (0 если база уже не пустая).
    """
    existing = await db.execute(select(func.count()).select_from(FoodTruck))
    if existing.scalar_one() > 0:
        return 0

    effective_from = datetime.utcnow() - timedelta(days=1)
    for truck_id, name, tags, price_tier, rating in DEMO_TRUCKS:
        truck = FoodTruck(
            truck_id=truck_id,
            name=name,
            cuisine_tags=tags,
            price_tier=price_tier,
            avg_rating=rating,
            is_open_now=True,
        )
        menu = MenuVersion(
            menu_id=f"menu_{truck_id}_v1",
            version_no=1,
            effective_from=effective_from,
        )
        for position, (item_name, price) in enumerate(MENU_TEMPLATES[tags[0]], start=1):
            menu.items.append(
                MenuItem(
                    item_id=f"{truck_id}_item_{position:02d}",
                    name=item_name,
                    price=Decimal(price),
                    available=True,
                )
            )
        truck.menus.append(menu)
        for day, start, end in DEMO_SCHEDULE:
            truck.schedule.append(
                Schedule(
                    schedule_id=f"{truck_id}_{day[:3].lower()}",
                    day_of_week=day,
                    start_time=start,
                    end_time=end,
                    typical_location="Rutgers University, New Brunswick, NJ",
                )
            )
        db.add(truck)

    await db.commit()
    return len(DEMO_TRUCKS)
