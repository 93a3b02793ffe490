"""roster — 멤버/팀 레포지토리 계층.

Member/team repository layer on SQLAlchemy: predicate queries, paging and
sorting, bulk updates, explicit relation resolution and units of work.
"""

__version__ = "1.0.0"
