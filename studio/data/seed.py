"""
Demo Data Seeder

Creates the schema and fills it with realistic studio records for local
development:
- Staff with roles and pay rates
- Marketing leads, some of which convert into clients
- Clients managed by staff
- Sessions with staff assignments, past and upcoming
- Products and invoices with line items

Run with ``python -m studio.data.seed`` (or the ``studio-seed`` script).
"""

import argparse
import asyncio
import random
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from faker import Faker
import structlog

from studio.config import get_settings
from studio.config.logging import configure_logging
from studio.database.connection import Database
from studio.database.models import (
    Client,
    Invoice,
    InvoiceLineItem,
    MarketingLead,
    PhotoSession,
    PhotoSessionAssignment,
    Product,
    Staff,
)

logger = structlog.get_logger(__name__)

fake = Faker()


# =============================================================================
# CONFIGURATION
# =============================================================================

STAFF_ROLES = ["Photographer", "Assistant", "Editor", "Studio Manager"]
SESSION_ROLES = ["Lead Photographer", "Second Shooter", "Assistant"]
INTERESTS = ["Weddings", "Portraits", "Family", "Newborn", "Events", "Headshots"]
LEAD_SOURCES = ["Referral", "Website", "Instagram", "Wedding Fair", "Google"]

# (session type, package, fee range)
SESSION_TYPES = [
    ("Wedding", "Full Day", (1500, 4000)),
    ("Portrait", "Classic", (150, 400)),
    ("Family", "Outdoor", (200, 500)),
    ("Newborn", "Studio", (250, 600)),
    ("Event", "Half Day", (600, 1500)),
    ("Headshot", "Express", (90, 250)),
]

PRODUCTS = [
    ("PRT-8X10", "8x10 Print", Decimal("6.00"), Decimal("25.00")),
    ("PRT-16X20", "16x20 Print", Decimal("18.00"), Decimal("75.00")),
    ("CNV-24X36", "24x36 Canvas", Decimal("60.00"), Decimal("240.00")),
    ("ALB-LTH", "Leather Album", Decimal("120.00"), Decimal("450.00")),
    ("ALB-MINI", "Mini Album", Decimal("35.00"), Decimal("120.00")),
    ("FRM-OAK", "Oak Frame", Decimal("22.00"), Decimal("65.00")),
    ("USB-HD", "Digital Files USB", Decimal("8.00"), Decimal("150.00")),
    ("CAL-DSK", "Desk Calendar", Decimal("9.00"), Decimal("35.00")),
]

TAX_RATE = Decimal("0.08")
CENT = Decimal("0.01")


# =============================================================================
# GENERATORS
# =============================================================================

class StudioDataGenerator:
    """Generate a consistent set of studio records around ``today``."""

    def __init__(self, today: Optional[date] = None, seed: Optional[int] = 42):
        self.today = today or date.today()
        if seed is not None:
            random.seed(seed)
            Faker.seed(seed)

    def staff(self, n: int = 6) -> List[Staff]:
        members = []
        for i in range(n):
            first, last = fake.first_name(), fake.last_name()
            members.append(Staff(
                staff_email=f"{first}.{last}{i}@studio.example".lower(),
                first_name=first,
                last_name=last,
                role=STAFF_ROLES[i % len(STAFF_ROLES)],
                phone=fake.numerify("###-###-####"),
                hire_date=fake.date_between(start_date="-8y", end_date="-30d"),
                pay_rate=Decimal(random.randint(18, 60)).quantize(CENT),
                street=fake.street_address(),
                city=fake.city(),
                state=fake.state_abbr(),
                zip=fake.postcode(),
            ))
        return members

    def marketing_leads(self, n: int = 30) -> List[MarketingLead]:
        return [
            MarketingLead(
                email=fake.unique.email(),
                interests=random.choice(INTERESTS),
                date_signed_up=fake.date_between(start_date="-2y", end_date="today"),
            )
            for _ in range(n)
        ]

    def clients(
        self,
        staff: List[Staff],
        leads: List[MarketingLead],
        n: int = 20,
        conversion_rate: float = 0.4,
    ) -> List[Client]:
        converted = random.sample(leads, k=min(len(leads), int(n * conversion_rate)))
        clients = []
        for i in range(n):
            lead = converted[i] if i < len(converted) else None
            clients.append(Client(
                client_email=lead.email if lead else fake.unique.email(),
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                phone=fake.numerify("###-###-####"),
                street=fake.street_address(),
                city=fake.city(),
                state=fake.state_abbr(),
                zip=fake.postcode(),
                lead_source="Marketing" if lead else random.choice(LEAD_SOURCES),
                managed_by_staff_email=random.choice(staff).staff_email,
                marketing_lead_email=lead.email if lead else None,
                last_session_date=None,
            ))
        return clients

    def sessions(self, clients: List[Client], per_client: int = 2) -> List[PhotoSession]:
        sessions = []
        for client in clients:
            for _ in range(random.randint(0, per_client)):
                session_type, package, (low, high) = random.choice(SESSION_TYPES)
                day = self.today + timedelta(days=random.randint(-300, 60))
                start = time(hour=random.randint(8, 16))
                end = time(hour=min(start.hour + random.randint(1, 6), 23))
                fee = Decimal(random.randint(low, high)).quantize(CENT)

                sessions.append(PhotoSession(
                    session_id=f"SESS{fake.unique.random_number(digits=10, fix_len=True)}",
                    session_type=session_type,
                    session_date=day,
                    session_start_time=start,
                    session_end_time=end,
                    location=fake.city(),
                    package_name=package,
                    session_fee=fee,
                    deposit_paid=(fee * Decimal("0.25")).quantize(CENT),
                    notes=fake.sentence(nb_words=8),
                    client_email=client.client_email,
                ))
                if client.last_session_date is None or day > client.last_session_date:
                    client.last_session_date = day
        return sessions

    def assignments(self, sessions: List[PhotoSession], staff: List[Staff]) -> List[PhotoSessionAssignment]:
        assignments = []
        for session in sessions:
            crew = random.sample(staff, k=random.randint(1, min(3, len(staff))))
            for role, member in zip(SESSION_ROLES, crew):
                assignments.append(PhotoSessionAssignment(
                    session_id=session.session_id,
                    staff_email=member.staff_email,
                    role=role,
                ))
        return assignments

    def products(self) -> List[Product]:
        return [
            Product(
                product_id=product_id,
                product_name=name,
                cost_price=cost,
                sale_price=price,
                stock_level=random.choice([0, 3, 8, 15, 40, 120]),
                supplier=fake.company(),
            )
            for product_id, name, cost, price in PRODUCTS
        ]

    def invoices(
        self,
        sessions: List[PhotoSession],
        products: List[Product],
        first_number: int = 1001,
    ):
        """One invoice per past session; returns (invoices, line_items)."""
        invoices, line_items = [], []
        number = first_number

        for session in sorted(sessions, key=lambda s: s.session_date):
            if session.session_date > self.today:
                continue

            picked = random.sample(products, k=random.randint(0, 3))
            items = [
                InvoiceLineItem(invoice_number=number, product_id=p.product_id, quantity=random.randint(1, 4))
                for p in picked
            ]
            subtotal = session.session_fee + sum(
                (item.quantity * p.sale_price for item, p in zip(items, picked)), Decimal("0")
            )
            tax = (subtotal * TAX_RATE).quantize(CENT)
            total = subtotal + tax
            paid = random.choice([total, total, (total / 2).quantize(CENT), Decimal("0.00")])

            invoices.append(Invoice(
                invoice_number=number,
                invoice_date=session.session_date,
                description=f"{session.session_type} session {session.session_id}",
                subtotal=subtotal,
                tax=tax,
                total_due=total,
                payment_received=paid,
                balance_due=total - paid,
                balance_due_date=session.session_date + timedelta(days=30),
                client_email=session.client_email,
            ))
            line_items.extend(items)
            number += 1

        return invoices, line_items


# =============================================================================
# SEEDING
# =============================================================================

async def seed_database(database: Database, clients: int = 20, today: Optional[date] = None) -> dict:
    """
    Create the schema and insert one generated data set.

    Rows are flushed parent tables first so foreign keys hold at every step.
    """
    generator = StudioDataGenerator(today=today)

    staff = generator.staff()
    leads = generator.marketing_leads(n=max(clients, 10))
    client_rows = generator.clients(staff, leads, n=clients)
    sessions = generator.sessions(client_rows)
    assignments = generator.assignments(sessions, staff)
    products = generator.products()
    invoices, line_items = generator.invoices(sessions, products)

    await database.create_all()

    tiers = [staff + leads + products, client_rows, sessions, assignments + invoices, line_items]
    async with database.session() as db:
        for tier in tiers:
            db.add_all(tier)
            await db.flush()

    counts = {
        "staff": len(staff),
        "marketing_leads": len(leads),
        "clients": len(client_rows),
        "sessions": len(sessions),
        "assignments": len(assignments),
        "products": len(products),
        "invoices": len(invoices),
        "line_items": len(line_items),
    }
    logger.info("Demo data seeded", **counts)
    return counts


async def _run(clients: int) -> None:
    settings = get_settings()
    configure_logging(settings=settings)
    database = Database.from_settings(settings.database)
    try:
        await seed_database(database, clients=clients)
    finally:
        await database.dispose()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the studio database with demo data")
    parser.add_argument("--clients", type=int, default=20, help="Number of clients to generate")
    args = parser.parse_args(argv)

    started = datetime.now()
    asyncio.run(_run(args.clients))
    logger.info("Seeding finished", seconds=round((datetime.now() - started).total_seconds(), 2))


if __name__ == "__main__":
    main()
