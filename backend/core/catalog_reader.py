"""
Catalog reader — metadata queries against the PostgreSQL system catalog.

Four independent readers, each taking a live SQLAlchemy connection and
returning normalized snapshot entities. They share no state so the schema
assembler can run them side by side on separate connections.
"""
import logging

from sqlalchemy import text

from models.schema import Column, Table, Relationship, EnumType, Index

logger = logging.getLogger(__name__)


# ── Tables ────────────────────────────────────────────────────────────────────

COLUMNS_SQL = text("""
    SELECT
      c.table_name,
      c.table_schema,
      c.column_name,
      c.data_type,
      c.udt_name,
      c.is_nullable,
      c.column_default,
      c.character_maximum_length,
      c.numeric_precision,
      c.ordinal_position
    FROM information_schema.columns c
    JOIN information_schema.tables t
      ON c.table_name = t.table_name AND c.table_schema = t.table_schema
    WHERE t.table_schema = :schema
      AND t.table_type = 'BASE TABLE'
    ORDER BY c.table_name, c.ordinal_position
""")

CONSTRAINTS_SQL = text("""
    SELECT
      tc.table_name,
      kcu.column_name,
      tc.constraint_type
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
      AND tc.table_schema = kcu.table_schema
    WHERE tc.table_schema = :schema
      AND tc.constraint_type IN ('PRIMARY KEY', 'FOREIGN KEY', 'UNIQUE')
""")

# reltuples is the planner's estimate: cheap, approximate, -1 before the first ANALYZE
ROW_ESTIMATES_SQL = text("""
    SELECT
      relname AS table_name,
      reltuples::bigint AS row_estimate
    FROM pg_class
    WHERE relnamespace = (SELECT oid FROM pg_namespace WHERE nspname = :schema)
      AND relkind = 'r'
""")


def read_tables(conn, schema: str = "public") -> list[Table]:
    """Tables with ordered columns, PK/FK/UNIQUE flags and estimated row counts."""
    column_rows = conn.execute(COLUMNS_SQL, {"schema": schema}).mappings().all()
    constraint_rows = conn.execute(CONSTRAINTS_SQL, {"schema": schema}).mappings().all()
    estimate_rows = conn.execute(ROW_ESTIMATES_SQL, {"schema": schema}).mappings().all()

    pk_keys: set[str] = set()
    fk_keys: set[str] = set()
    unique_keys: set[str] = set()
    for row in constraint_rows:
        key = f"{row['table_name']}.{row['column_name']}"
        if row["constraint_type"] == "PRIMARY KEY":
            pk_keys.add(key)
        elif row["constraint_type"] == "FOREIGN KEY":
            fk_keys.add(key)
        elif row["constraint_type"] == "UNIQUE":
            unique_keys.add(key)

    row_counts = {r["table_name"]: max(0, int(r["row_estimate"] or 0)) for r in estimate_rows}

    # table_name → (schema, columns); rows already arrive in ordinal order
    grouped: dict[str, tuple[str, list[Column]]] = {}
    for row in column_rows:
        table_name = row["table_name"]
        if table_name not in grouped:
            grouped[table_name] = (row["table_schema"], [])
        key = f"{table_name}.{row['column_name']}"
        grouped[table_name][1].append(Column(
            name=row["column_name"],
            data_type=row["data_type"],
            udt_name=row["udt_name"],
            is_nullable=row["is_nullable"] == "YES",
            column_default=row["column_default"],
            character_max_length=row["character_maximum_length"],
            numeric_precision=row["numeric_precision"],
            ordinal_position=row["ordinal_position"],
            is_primary_key=key in pk_keys,
            is_foreign_key=key in fk_keys,
            is_unique=key in unique_keys,
        ))

    tables = [
        Table(
            name=name,
            schema=table_schema,
            columns=columns,
            estimated_row_count=row_counts.get(name, 0),
        )
        for name, (table_schema, columns) in grouped.items()
    ]
    logger.debug("Read %d tables from schema %s", len(tables), schema)
    return sorted(tables, key=lambda t: t.name)


# ── Relationships ─────────────────────────────────────────────────────────────

RELATIONSHIPS_SQL = text("""
    SELECT
      tc.constraint_name,
      tc.table_name AS source_table,
      kcu.column_name AS source_column,
      ccu.table_name AS target_table,
      ccu.column_name AS target_column,
      rc.update_rule,
      rc.delete_rule
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
      AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage ccu
      ON ccu.constraint_name = tc.constraint_name
      AND ccu.table_schema = tc.table_schema
    JOIN information_schema.referential_constraints rc
      ON tc.constraint_name = rc.constraint_name
      AND tc.table_schema = rc.constraint_schema
    WHERE tc.constraint_type = 'FOREIGN KEY'
      AND tc.table_schema = :schema
    ORDER BY tc.table_name, kcu.column_name
""")


def read_relationships(conn, schema: str = "public") -> list[Relationship]:
    """One Relationship per foreign-key column, rules copied verbatim."""
    rows = conn.execute(RELATIONSHIPS_SQL, {"schema": schema}).mappings().all()
    return [
        Relationship(
            constraint_name=row["constraint_name"],
            source_table=row["source_table"],
            source_column=row["source_column"],
            target_table=row["target_table"],
            target_column=row["target_column"],
            update_rule=row["update_rule"],
            delete_rule=row["delete_rule"],
        )
        for row in rows
    ]


# ── Enums ─────────────────────────────────────────────────────────────────────

ENUMS_SQL = text("""
    SELECT
      t.typname AS enum_name,
      n.nspname AS enum_schema,
      e.enumlabel AS enum_value,
      e.enumsortorder AS sort_order
    FROM pg_type t
    JOIN pg_enum e ON t.oid = e.enumtypid
    JOIN pg_namespace n ON t.typnamespace = n.oid
    WHERE n.nspname = :schema
    ORDER BY t.typname, e.enumsortorder
""")


def read_enums(conn, schema: str = "public") -> list[EnumType]:
    """Enum types with labels in declaration order (never alphabetized)."""
    rows = conn.execute(ENUMS_SQL, {"schema": schema}).mappings().all()

    grouped: dict[str, tuple[str, list[str]]] = {}
    for row in rows:
        name = row["enum_name"]
        if name not in grouped:
            grouped[name] = (row["enum_schema"], [])
        grouped[name][1].append(row["enum_value"])

    enums = [EnumType(name=name, schema=enum_schema, values=values) for name, (enum_schema, values) in grouped.items()]
    return sorted(enums, key=lambda e: e.name)


# ── Indexes ───────────────────────────────────────────────────────────────────

# WITH ORDINALITY keeps multi-column indexes in key order
INDEXES_SQL = text("""
    SELECT
      i.relname AS index_name,
      t.relname AS table_name,
      a.attname AS column_name,
      ix.indisunique AS is_unique,
      ix.indisprimary AS is_primary,
      am.amname AS index_type
    FROM pg_index ix
    JOIN pg_class t ON t.oid = ix.indrelid
    JOIN pg_class i ON i.oid = ix.indexrelid
    JOIN pg_am am ON i.relam = am.oid
    JOIN pg_namespace n ON t.relnamespace = n.oid
    CROSS JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS k(attnum, ord)
    JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum
    WHERE n.nspname = :schema
    ORDER BY t.relname, i.relname, k.ord
""")


def read_indexes(conn, schema: str = "public") -> list[Index]:
    rows = conn.execute(INDEXES_SQL, {"schema": schema}).mappings().all()

    grouped: dict[str, dict] = {}
    for row in rows:
        name = row["index_name"]
        if name not in grouped:
            grouped[name] = {
                "name": name,
                "table_name": row["table_name"],
                "columns": [],
                "is_unique": row["is_unique"],
                "is_primary": row["is_primary"],
                "index_type": row["index_type"],
            }
        grouped[name]["columns"].append(row["column_name"])

    return sorted((Index(**fields) for fields in grouped.values()), key=lambda i: i.name)
