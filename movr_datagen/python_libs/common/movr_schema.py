"""
MovR schema contract.

Holds the fixed city list, the column layout and DDL body of every MovR table and
the foreign key statements applied after a bulk load. Column order is significant:
row generators return tuples in exactly this order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class City:
    """A city and the locality (region) it belongs to."""

    name: str
    locality: str


# Order matters: the city partition assigns row ranges in this order.
CITIES: Tuple[City, ...] = (
    City("new york", "us_east"),
    City("boston", "us_east"),
    City("washington dc", "us_east"),
    City("seattle", "us_west"),
    City("san francisco", "us_west"),
    City("los angeles", "us_west"),
    City("chicago", "us_central"),
    City("detroit", "us_central"),
    City("minneapolis", "us_central"),
    City("amsterdam", "eu_west"),
    City("paris", "eu_west"),
    City("rome", "eu_west"),
)

NUM_CITIES = len(CITIES)

USERS = "users"
VEHICLES = "vehicles"
RIDES = "rides"
VEHICLE_LOCATION_HISTORIES = "vehicle_location_histories"
PROMO_CODES = "promo_codes"
USER_PROMO_CODES = "user_promo_codes"

# Same order as the tables are created and loaded.
TABLE_NAMES: Tuple[str, ...] = (
    USERS,
    VEHICLES,
    RIDES,
    VEHICLE_LOCATION_HISTORIES,
    PROMO_CODES,
    USER_PROMO_CODES,
)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp with microsecond precision and an explicit UTC offset.

    >>> format_timestamp(datetime(2019, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
    '2019-01-02 03:04:05.000000+00:00'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(sep=" ", timespec="microseconds")


@dataclass(frozen=True)
class TableSchema:
    """Column layout and DDL body of one MovR table."""

    name: str
    columns: Tuple[str, ...]
    primary_key: Tuple[str, ...]
    body: str
    indexes: Tuple[Tuple[str, ...], ...] = field(default_factory=tuple)

    def create_statement(self) -> str:
        return f"CREATE TABLE IF NOT EXISTS {self.name} {self.body}"


USERS_SCHEMA = TableSchema(
    name=USERS,
    columns=("id", "city", "name", "address", "credit_card"),
    primary_key=("city", "id"),
    body="""(
  id UUID NOT NULL,
  city VARCHAR NOT NULL,
  name VARCHAR NULL,
  address VARCHAR NULL,
  credit_card VARCHAR NULL,
  PRIMARY KEY (city ASC, id ASC)
)""",
)

VEHICLES_SCHEMA = TableSchema(
    name=VEHICLES,
    columns=(
        "id",
        "city",
        "type",
        "owner_id",
        "creation_time",
        "status",
        "current_location",
        "ext",
    ),
    primary_key=("city", "id"),
    indexes=(("city", "owner_id"),),
    body="""(
  id UUID NOT NULL,
  city VARCHAR NOT NULL,
  type VARCHAR NULL,
  owner_id UUID NULL,
  creation_time TIMESTAMP NULL,
  status VARCHAR NULL,
  current_location VARCHAR NULL,
  ext JSONB NULL,
  PRIMARY KEY (city ASC, id ASC),
  INDEX vehicles_auto_index_fk_city_ref_users (city ASC, owner_id ASC)
)""",
)

RIDES_SCHEMA = TableSchema(
    name=RIDES,
    columns=(
        "id",
        "city",
        "vehicle_city",
        "rider_id",
        "vehicle_id",
        "start_address",
        "end_address",
        "start_time",
        "end_time",
        "revenue",
    ),
    primary_key=("city", "id"),
    indexes=(("city", "rider_id"), ("vehicle_city", "vehicle_id")),
    body="""(
  id UUID NOT NULL,
  city VARCHAR NOT NULL,
  vehicle_city VARCHAR NULL,
  rider_id UUID NULL,
  vehicle_id UUID NULL,
  start_address VARCHAR NULL,
  end_address VARCHAR NULL,
  start_time TIMESTAMP NULL,
  end_time TIMESTAMP NULL,
  revenue DECIMAL(10,2) NULL,
  PRIMARY KEY (city ASC, id ASC),
  INDEX rides_auto_index_fk_city_ref_users (city ASC, rider_id ASC),
  INDEX rides_auto_index_fk_vehicle_city_ref_vehicles (vehicle_city ASC, vehicle_id ASC),
  CONSTRAINT check_vehicle_city_city CHECK (vehicle_city = city)
)""",
)

VEHICLE_LOCATION_HISTORIES_SCHEMA = TableSchema(
    name=VEHICLE_LOCATION_HISTORIES,
    columns=("city", "ride_id", "timestamp", "lat", "long"),
    primary_key=("city", "ride_id", "timestamp"),
    body="""(
  city VARCHAR NOT NULL,
  ride_id UUID NOT NULL,
  "timestamp" TIMESTAMP NOT NULL,
  lat FLOAT8 NULL,
  long FLOAT8 NULL,
  PRIMARY KEY (city ASC, ride_id ASC, "timestamp" ASC)
)""",
)

PROMO_CODES_SCHEMA = TableSchema(
    name=PROMO_CODES,
    columns=("code", "description", "creation_time", "expiration_time", "rules"),
    primary_key=("code",),
    body="""(
  code VARCHAR NOT NULL,
  description VARCHAR NULL,
  creation_time TIMESTAMP NULL,
  expiration_time TIMESTAMP NULL,
  rules JSONB NULL,
  PRIMARY KEY (code ASC)
)""",
)

USER_PROMO_CODES_SCHEMA = TableSchema(
    name=USER_PROMO_CODES,
    columns=("city", "user_id", "code", "timestamp", "usage_count"),
    primary_key=("city", "user_id", "code"),
    body="""(
  city VARCHAR NOT NULL,
  user_id UUID NOT NULL,
  code VARCHAR NOT NULL,
  "timestamp" TIMESTAMP NULL,
  usage_count INT NULL,
  PRIMARY KEY (city ASC, user_id ASC, code ASC)
)""",
)

SCHEMAS: Dict[str, TableSchema] = {
    schema.name: schema
    for schema in (
        USERS_SCHEMA,
        VEHICLES_SCHEMA,
        RIDES_SCHEMA,
        VEHICLE_LOCATION_HISTORIES_SCHEMA,
        PROMO_CODES_SCHEMA,
        USER_PROMO_CODES_SCHEMA,
    )
}

# Applied by the post-load hook, in order.
FOREIGN_KEY_STATEMENTS: List[str] = [
    "ALTER TABLE vehicles ADD FOREIGN KEY "
    "(city, owner_id) REFERENCES users (city, id)",
    "ALTER TABLE rides ADD FOREIGN KEY "
    "(city, rider_id) REFERENCES users (city, id)",
    "ALTER TABLE rides ADD FOREIGN KEY "
    "(vehicle_city, vehicle_id) REFERENCES vehicles (city, id)",
    "ALTER TABLE vehicle_location_histories ADD FOREIGN KEY "
    "(city, ride_id) REFERENCES rides (city, id)",
    "ALTER TABLE user_promo_codes ADD FOREIGN KEY "
    "(city, user_id) REFERENCES users (city, id)",
]

# Nested generator invocations needed to build one row of each table.
REFERENCE_CHAIN_DEPTH: Dict[str, int] = {
    USERS: 1,
    VEHICLES: 2,
    RIDES: 3,
    VEHICLE_LOCATION_HISTORIES: 4,
    PROMO_CODES: 1,
    USER_PROMO_CODES: 0,
}
