# app/modules/employees/matricule.py
"""Génération du matricule employé.

Format: ``<PREFIXE>-<initiale nom><initiale prénom>-<année>-<5 chiffres>``,
par ex. ``NOV-KJ-2024-04217``. Le suffixe aléatoire n'est pas revérifié
contre la base: une collision reste possible (~1/99999 par paire
d'initiales et par an).
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from app.utils.text import strip_accents

DEFAULT_PREFIX = "NOV"
RANDOM_UPPER = 99999  # exclusif


def _random_suffix(rng: Optional[random.Random] = None) -> str:
    return f"{(rng or random).randrange(RANDOM_UPPER):05d}"


def _initial(name: Optional[str]) -> str:
    for c in strip_accents(name).strip():
        if c.isalpha():
            return c.upper()
    return ""


def generate_generic_matricule(
    *, prefix: str = DEFAULT_PREFIX, today: Optional[date] = None, rng: Optional[random.Random] = None
) -> str:
    year = (today or date.today()).year
    return f"{prefix}-EMP-{year}-{_random_suffix(rng)}"


def generate_matricule(
    nom: Optional[str],
    prenom: Optional[str],
    *,
    prefix: str = DEFAULT_PREFIX,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> str:
    initials = _initial(nom), _initial(prenom)
    if not all(initials):
        return generate_generic_matricule(prefix=prefix, today=today, rng=rng)
    year = (today or date.today()).year
    return f"{prefix}-{''.join(initials)}-{year}-{_random_suffix(rng)}"


def generate_qr_id(*, rng: Optional[random.Random] = None) -> str:
    return f"EMP-{_random_suffix(rng)}"


@dataclass
class MatriculeAllocator:
    prefix: str = DEFAULT_PREFIX
    clock: Callable[[], date] = date.today
    rng: random.Random = field(default_factory=random.Random)

    def allocate(self, nom: Optional[str], prenom: Optional[str]) -> str:
        return generate_matricule(nom, prenom, prefix=self.prefix, today=self.clock(), rng=self.rng)

    def qr_id(self) -> str:
        return generate_qr_id(rng=self.rng)
