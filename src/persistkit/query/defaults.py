"""Default queries every EntityConfig starts with."""

from persistkit.errors import InvalidArgumentError
from persistkit.query.parameters import QueryParameters
from persistkit.query.query import Query
from persistkit.query.sql import Statement, entity_field, placeholders, where_clause


def generate_save(params: QueryParameters) -> Statement:
    columns = params.columns
    return Statement(
        text=f"INSERT INTO {params.conf.table} ({', '.join(columns)}) "
        f"VALUES ({placeholders(len(columns))})",
        values=list(params.values),
    )


def generate_fetch(params: QueryParameters) -> Statement:
    return Statement(
        text=f"SELECT * FROM {params.conf.table} WHERE {params.key} = $1",
        values=[params.kval],
    )


def generate_update(params: QueryParameters) -> Statement:
    conf = params.conf
    columns = params.columns
    assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, 1))
    return Statement(
        text=f"UPDATE {conf.table} SET {assignments} "
        f"WHERE {conf.primary_key} = ${len(columns) + 1}",
        values=list(params.values) + [entity_field(params.ent, conf.primary_key)],
    )


def generate_delete(params: QueryParameters) -> Statement:
    return Statement(
        text=f"DELETE FROM {params.conf.table} WHERE {params.key} = $1",
        values=[params.kval],
    )


def generate_fetch_many(params: QueryParameters) -> Statement:
    text = f"SELECT * FROM {params.conf.table}"
    conditions = params.conditions
    if conditions:
        text += f" WHERE {where_clause(conditions)}"
    return Statement(text=text, values=list(conditions.values()))


def generate_delete_many(params: QueryParameters) -> Statement:
    conditions = params.conditions
    if not conditions:
        # An unfiltered DELETE would empty the table
        raise InvalidArgumentError("delete_many needs at least one condition")
    return Statement(
        text=f"DELETE FROM {params.conf.table} WHERE {where_clause(conditions)}",
        values=list(conditions.values()),
    )


def default_queries() -> list[Query]:
    """Build fresh save/fetch/update/delete/fetch_many/delete_many queries.

    fetch has no transform type: it uses the default unique-lookup
    transform, which raises when more than one row matches.
    """
    return [
        Query(name="save", generate=generate_save, type="boolean"),
        Query(name="fetch", generate=generate_fetch),
        Query(name="update", generate=generate_update, type="boolean"),
        Query(name="delete", generate=generate_delete, type="boolean"),
        Query(name="fetch_many", generate=generate_fetch_many, type="multiple"),
        Query(name="delete_many", generate=generate_delete_many, type="count"),
    ]
