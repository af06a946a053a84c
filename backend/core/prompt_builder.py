"""
Prompt builder — compact plain-text rendering of a schema snapshot for the
language model.
"""
from models.schema import Column, ExtractedSchema


def _format_column(col: Column) -> str:
    flags = []
    if col.is_primary_key: flags.append("PK")
    if col.is_foreign_key: flags.append("FK")
    if not col.is_nullable: flags.append("NOT NULL")
    flag_str = f" [{', '.join(flags)}]" if flags else ""
    return f"  {col.name} {col.udt_name}{flag_str}"


def build_schema_summary(schema: ExtractedSchema) -> str:
    """
    TABLE blocks, then ENUMS and RELATIONSHIPS sections when non-empty.
    An empty snapshot renders as the empty string.
    """
    lines: list[str] = []

    for table in schema.tables:
        lines.append(f"TABLE {table.name}:")
        lines.extend(_format_column(c) for c in table.columns)

    if schema.enums:
        lines.append("\nENUMS:")
        for e in schema.enums:
            lines.append(f"  {e.name}: {', '.join(e.values)}")

    if schema.relationships:
        lines.append("\nRELATIONSHIPS:")
        for r in schema.relationships:
            lines.append(f"  {r.source_table}.{r.source_column} -> {r.target_table}.{r.target_column}")

    return "\n".join(lines)
