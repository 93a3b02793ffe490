"""공통 유틸리티 패키지 — 예외, 페이지네이션.

Shared utilities package — Exception taxonomy and pagination helpers.
"""
