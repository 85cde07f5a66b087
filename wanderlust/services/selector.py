# wanderlust/services/selector.py
# Narrows discovered POIs down to a few worth narrating.

import json
import logging
import re
from typing import List, Sequence

from wanderlust.models.dto import PointOfInterest
from wanderlust.services.reasoning import ReasoningService

logger = logging.getLogger(__name__)

SELECTION_SIZE = 3

# Non-greedy: the first bracketed literal in the reply
_ARRAY_PATTERN = re.compile(r"\[.*?\]")

SELECTION_PROMPT = """You are an AI travel guide tasked with selecting the most interesting locations from a list.
Your goal is to choose exactly {count} diverse and engaging points of interest that would make for an interesting adventure.

Here are the points of interest, with their name, type, and distance from the user:
{listing}

Select the {count} most interesting, diverse, and unique locations from this list.
Format your response as a JSON array with just the indices (1-based) of your selections.
Example: [4, 7, 12]
"""


class SelectionParseError(ValueError):
    """The reasoning service reply holds no usable index array."""


def unique_by_id(pois: Sequence[PointOfInterest]) -> List[PointOfInterest]:
    seen = set()
    unique: List[PointOfInterest] = []
    for poi in pois:
        if poi.id not in seen:
            seen.add(poi.id)
            unique.append(poi)
    return unique


def build_selection_prompt(pois: Sequence[PointOfInterest], count: int = SELECTION_SIZE) -> str:
    listing = "\n".join(
        f"{index}. {poi.name} ({poi.type}, {poi.distance}m away)"
        for index, poi in enumerate(pois, start=1)
    )
    return SELECTION_PROMPT.format(count=count, listing=listing)


def parse_selection(text: str) -> List[int]:
    """Extract the 1-based indices from the first JSON array in `text`.

    Raises:
        SelectionParseError: when no array is present or it is not valid JSON.
    """
    match = _ARRAY_PATTERN.search(text or "")
    if not match:
        raise SelectionParseError("No index array found in selection reply")
    try:
        values = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise SelectionParseError(f"Index array is not valid JSON: {match.group(0)!r}") from e
    indices: List[int] = []
    for value in values:
        # bool is an int subclass; true/false are not indices
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            indices.append(value)
        elif isinstance(value, float) and value.is_integer():
            indices.append(int(value))
    return indices


def resolve_selection(
    indices: Sequence[int], pois: Sequence[PointOfInterest], count: int = SELECTION_SIZE
) -> List[PointOfInterest]:
    """Map indices to POIs, then top up with the closest unselected ones."""
    chosen: List[PointOfInterest] = []
    chosen_ids = set()
    for index in indices:
        if not 1 <= index <= len(pois):
            continue
        poi = pois[index - 1]
        if poi.id not in chosen_ids:
            chosen.append(poi)
            chosen_ids.add(poi.id)

    for poi in pois:
        if len(chosen) >= count:
            break
        if poi.id not in chosen_ids:
            chosen.append(poi)
            chosen_ids.add(poi.id)

    return chosen[:count]


class CandidateSelector:
    """Asks the reasoning service for the most interesting few POIs.

    The input is expected sorted by distance. If the service fails or its
    reply cannot be parsed, the closest POIs are returned instead, so a
    non-empty input always yields a non-empty selection.
    """

    def __init__(self, reasoning: ReasoningService, count: int = SELECTION_SIZE):
        self.reasoning = reasoning
        self.count = count

    async def select(self, pois: Sequence[PointOfInterest]) -> List[PointOfInterest]:
        candidates = unique_by_id(pois)
        if len(candidates) <= self.count:
            return candidates

        prompt = build_selection_prompt(candidates, self.count)
        try:
            reply = await self.reasoning.complete(prompt)
            indices = parse_selection(reply)
        except Exception as e:
            logger.warning(f"POI selection failed, using the {self.count} closest: {e}")
            return candidates[:self.count]

        selected = resolve_selection(indices, candidates, self.count)
        logger.info(f"Selected POIs: {[poi.name for poi in selected]}")
        return selected
