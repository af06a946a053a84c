"""
Type inferencer — derives one typed entity definition per table.

Pure transform over an already-read catalog: no I/O. Each entity carries a
property per column, a relation property per foreign-key column and a
reverse (zero-or-more) property per table that references it.
"""
from models.schema import Table, Relationship, EnumType, EntityType, TypeProperty

PG_TO_LOGICAL_TYPE: dict[str, str] = {
    # Numeric
    "int2": "number",
    "int4": "number",
    "int8": "number",
    "float4": "number",
    "float8": "number",
    "numeric": "number",
    "serial": "number",
    "bigserial": "number",
    "smallserial": "number",
    # String
    "varchar": "string",
    "text": "string",
    "char": "string",
    "bpchar": "string",
    "name": "string",
    "citext": "string",
    "uuid": "string",
    "time": "string",
    "timetz": "string",
    "interval": "string",
    # Boolean
    "bool": "boolean",
    # Date/Time
    "timestamp": "Date",
    "timestamptz": "Date",
    "date": "Date",
    # JSON
    "json": "Record<string, unknown>",
    "jsonb": "Record<string, unknown>",
    # Binary
    "bytea": "Buffer",
}

UNKNOWN_TYPE = "unknown"


def pascal_case(name: str) -> str:
    """snake_case → PascalCase. Each `_`-segment is capitalised and the rest of it lower-cased."""
    return "".join(part[0].upper() + part[1:].lower() for part in name.split("_") if part)


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def map_udt_type(udt_name: str, enum_names: set[str]) -> tuple[str, bool]:
    """Return (logical type, is_array) for a catalog udt name.

    PostgreSQL names array types after their element type with a leading
    underscore, e.g. ``_text`` for ``text[]``.
    """
    is_array = udt_name.startswith("_")
    base = udt_name[1:] if is_array else udt_name
    if base in enum_names:
        return pascal_case(base), is_array
    return PG_TO_LOGICAL_TYPE.get(base, UNKNOWN_TYPE), is_array


def _add(properties: list[TypeProperty], seen: set[str], prop: TypeProperty) -> None:
    if prop.name in seen:
        return
    seen.add(prop.name)
    properties.append(prop)


def infer_entity_type(
    table: Table,
    fk_targets: dict[str, str],
    reverse_sources: dict[str, list[Relationship]],
    enum_names: set[str],
) -> EntityType:
    properties: list[TypeProperty] = []
    seen: set[str] = set()
    associated: set[str] = set()

    for col in sorted(table.columns, key=lambda c: c.ordinal_position):
        logical_type, is_array = map_udt_type(col.udt_name, enum_names)
        _add(properties, seen, TypeProperty(
            name=camel_case(col.name),
            type=logical_type,
            is_optional=col.is_nullable and not col.is_primary_key,
            is_array=is_array,
        ))

        target = fk_targets.get(f"{table.name}.{col.name}")
        if target is not None:
            _add(properties, seen, TypeProperty(
                name=camel_case(target),
                type=pascal_case(target),
                is_optional=col.is_nullable,
                is_array=False,
                description=f"Relation to {target}",
            ))
            associated.add(target)

    for rel in reverse_sources.get(table.name, []):
        _add(properties, seen, TypeProperty(
            name=camel_case(rel.source_table) + "s",
            type=pascal_case(rel.source_table),
            is_optional=True,
            is_array=True,
            description=f"Reverse relation from {rel.source_table}.{rel.source_column}",
        ))
        associated.add(rel.source_table)

    associated.discard(table.name)
    return EntityType(
        name=pascal_case(table.name),
        table_name=table.name,
        properties=properties,
        associated_tables=sorted(associated),
    )


def infer_entity_types(
    tables: list[Table],
    relationships: list[Relationship],
    enums: list[EnumType],
) -> list[EntityType]:
    """One EntityType per table, in table order."""
    enum_names = {e.name for e in enums}

    # "source_table.source_column" → target table
    fk_targets: dict[str, str] = {}
    # target table → relationships pointing at it
    reverse_sources: dict[str, list[Relationship]] = {}
    for rel in relationships:
        fk_targets[f"{rel.source_table}.{rel.source_column}"] = rel.target_table
        reverse_sources.setdefault(rel.target_table, []).append(rel)

    return [infer_entity_type(t, fk_targets, reverse_sources, enum_names) for t in tables]
