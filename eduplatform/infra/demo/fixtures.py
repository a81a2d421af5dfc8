"""Données de démonstration déterministes.

Ce module fournit le jeu d'enregistrements de repli utilisé quand le store est absent, vide ou en
échec. Les lignes sont fixes (aucun aléa, aucune date relative) et passent par les mêmes
conversions que les lignes live, de sorte que l'affichage ne dépend pas de la provenance.
"""

from __future__ import annotations

from typing import Any

from eduplatform.domain.entities import Advertisement, Course
from eduplatform.domain.records import map_advertisements, map_courses

DEMO_INSTRUCTOR_ID = "demo-instructor"

_COURSE_ROWS: tuple[dict[str, Any], ...] = (
    {
        "id": "demo-course-1",
        "title": "Advanced React",
        "description": "Learn React from scratch to advanced with hands-on projects",
        "thumbnail_url": "https://images.unsplash.com/photo-1633356122544-f134324a6cee?w=400&h=300&fit=crop",
        "instructor_id": DEMO_INSTRUCTOR_ID,
        "price": 199.90,
        "duration": 1200,
        "level": "advanced",
        "category": "Programming",
        "tags": ["React", "JavaScript", "Frontend"],
        "is_published": True,
        "total_views": 1250,
        "rating": 4.8,
        "total_ratings": 89,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    },
    {
        "id": "demo-course-2",
        "title": "Complete Digital Marketing",
        "description": "End-to-end digital marketing strategies",
        "thumbnail_url": "https://images.unsplash.com/photo-1460925895917-afdab827c52f?w=400&h=300&fit=crop",
        "instructor_id": DEMO_INSTRUCTOR_ID,
        "price": 299.90,
        "duration": 1800,
        "level": "intermediate",
        "category": "Marketing",
        "tags": ["Marketing", "Digital", "Social Media"],
        "is_published": True,
        "total_views": 890,
        "rating": 4.6,
        "total_ratings": 67,
        "created_at": "2024-01-15T00:00:00+00:00",
        "updated_at": "2024-01-15T00:00:00+00:00",
    },
    {
        "id": "demo-course-3",
        "title": "Python for Data Analysis",
        "description": "Pandas, plotting and reporting for everyday analysis",
        "instructor_id": DEMO_INSTRUCTOR_ID,
        "price": 149.90,
        "duration": 960,
        "level": "beginner",
        "category": "Programming",
        "tags": ["Python", "Data"],
        "is_published": True,
        "total_views": 640,
        "rating": 4.7,
        "total_ratings": 41,
        "created_at": "2024-02-03T00:00:00+00:00",
        "updated_at": "2024-02-03T00:00:00+00:00",
    },
)

# Bornes éloignées: le statut dérivé reste le même quelle que soit la date du jour.
_ADVERTISEMENT_ROWS: tuple[dict[str, Any], ...] = (
    {
        "id": "demo-ad-1",
        "title": "Bootcamp Spring Sale",
        "description": "Featured banner for the programming catalogue",
        "target_url": "https://example.com/bootcamp",
        "price_per_day": 25.0,
        "start_date": "2024-01-01",
        "end_date": "2099-12-31",
        "impressions": 12000,
        "clicks": 480,
        "category": "Programming",
        "placement": "banner",
    },
    {
        "id": "demo-ad-2",
        "title": "Marketing Summit",
        "description": "Sidebar slot for the marketing category",
        "target_url": "https://example.com/summit",
        "price_per_day": 12.5,
        "start_date": "2099-01-01",
        "end_date": "2099-03-31",
        "impressions": 0,
        "clicks": 0,
        "category": "Marketing",
        "placement": "sidebar",
    },
    {
        "id": "demo-ad-3",
        "title": "Design Tools Launch",
        "description": "Footer placement, finished campaign",
        "target_url": "https://example.com/design",
        "price_per_day": 8.0,
        "start_date": "2023-06-01",
        "end_date": "2023-08-31",
        "impressions": 5400,
        "clicks": 162,
        "category": "Design",
        "placement": "footer",
    },
)


def demo_courses() -> list[Course]:
    """Retourne les cours de démonstration (toujours les mêmes, dans le même ordre)."""
    return map_courses(_COURSE_ROWS).records


def demo_advertisements() -> list[Advertisement]:
    """Retourne les annonces de démonstration (une active, une à venir, une expirée)."""
    return map_advertisements(_ADVERTISEMENT_ROWS).records
