"""Networked media player as seen by discovery."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Player:
    name: str
    address: str
