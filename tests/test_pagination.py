"""Pagination normalizer tests."""
import pytest
from sqlmodel import select
from framework.query import normalize_pagination, paginate
from apps.security.models import User


@pytest.mark.parametrize("page", [0, -1, -100])
def test_non_positive_page_becomes_one(page):
    assert normalize_pagination(page, 10) == (1, 10)


@pytest.mark.parametrize("limit", [0, -1, -50])
def test_non_positive_limit_becomes_one(limit):
    assert normalize_pagination(3, limit) == (3, 1)


@pytest.mark.parametrize("page,limit", [(1, 1), (2, 10), (7, 25), (1, 10_000)])
def test_positive_values_unchanged(page, limit):
    assert normalize_pagination(page, limit) == (page, limit)


def _sql(statement) -> str:
    return str(statement.compile(compile_kwargs={"literal_binds": True}))


def test_paginate_windows_statement():
    sql = _sql(paginate(select(User), 3, 10))
    assert "LIMIT 10 OFFSET 20" in sql


def test_paginate_normalizes_before_windowing():
    sql = _sql(paginate(select(User), 0, 0))
    assert "LIMIT 1 OFFSET 0" in sql
