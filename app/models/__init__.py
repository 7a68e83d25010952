"""
데이터베이스 모델 export
"""
from app.models.achievement import Achievement
from app.models.profile import ChildProfile

__all__ = [
    "Achievement",
    "ChildProfile",
]
