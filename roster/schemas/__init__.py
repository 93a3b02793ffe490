"""Pydantic 스키마 패키지 — 프로젝션(DTO) 및 API 요청/응답 스키마.

Pydantic schema package — Query-time projections (DTOs) and API request/response schemas.
"""
