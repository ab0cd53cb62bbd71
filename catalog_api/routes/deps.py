"""Request dependencies resolving the app-owned caches."""

from fastapi import Request

from catalog_api.services.statistics import StatisticsEngine
from catalog_api.settings import Settings
from catalog_api.stores.json_file import RecordStore


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_statistics_engine(request: Request) -> StatisticsEngine:
    return request.app.state.statistics_engine


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
