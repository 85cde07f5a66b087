"""Narrative orchestrator: turns nearby POIs into a story recommending the next stop."""

import logging
from typing import List, Optional, Sequence

from wanderlust.core.config import settings
from wanderlust.models.dto import Message, PointOfInterest, StoryResponse
from wanderlust.services.reasoning import ReasoningService
from wanderlust.services.selector import SELECTION_SIZE, CandidateSelector, unique_by_id

logger = logging.getLogger(__name__)

STORY_PROMPT = """You are a local guide and storyteller named {narrator}.
The user is currently at a location near these points of interest:
{descriptions}
{context}
Create an engaging narrative that connects these {count} locations. Make the story feel like an adventure or a discovery.
Recommend the first location in the list as the next destination for the user to visit.
Your response should be friendly and conversational, as if you're a knowledgeable local friend showing them around.
Include some brief historical or interesting facts about these places.
End with a question that encourages the user to visit the recommended destination."""


def describe_poi(poi: PointOfInterest) -> str:
    return f"{poi.name} ({poi.type}, {poi.distance}m away)"


def format_history(history: Sequence[Message]) -> str:
    return "\n".join(f"{msg.role}: {msg.content}" for msg in history)


def build_story_prompt(
    selected: Sequence[PointOfInterest],
    history: Sequence[Message],
    narrator: str = settings.NARRATOR_NAME,
    style: Optional[str] = settings.NARRATIVE_STYLE,
) -> str:
    descriptions = "\n".join(f"- {describe_poi(poi)}" for poi in selected)
    context = ""
    if history:
        context = f"\nPrevious conversation context:\n{format_history(history)}\n"

    prompt = STORY_PROMPT.format(
        narrator=narrator,
        descriptions=descriptions,
        context=context,
        count=len(selected),
    )
    if style:
        prompt += f"\n\n{style}"
    return prompt


def fallback_story(pois: Sequence[PointOfInterest], history: Sequence[Message] = ()) -> StoryResponse:
    """Deterministic narrative over the first few POIs; no external calls."""
    selected = unique_by_id(pois)[:SELECTION_SIZE]
    destination = selected[0]
    places = ", ".join(describe_poi(poi) for poi in selected)

    if history:
        story = (
            f"Let's keep exploring! Still close by you'll find {places}. "
            f"My suggestion for the next stop is {destination.name}, only {destination.distance} meters away. "
            f"It's a {destination.type} worth a look. Shall we head over there?"
        )
    else:
        story = (
            f"I've discovered some lovely spots around here! Not far from you there's {places}. "
            f"I'd start with {destination.name}, just {destination.distance} meters from where you are. "
            f"It seems to be an interesting {destination.type}. Let me know when you get there "
            f"and I'll tell you more! What do you think, fancy going there?"
        )

    return StoryResponse(selected_pois=selected, story=story, next_destination=destination)


class NarrativeOrchestrator:
    """Selects POIs and asks the reasoning service to narrate them.

    Any failure on the way (selection, prompt building, the completion call)
    degrades to `fallback_story`, so callers always get a valid response for
    a non-empty POI list.
    """

    def __init__(
        self,
        reasoning: ReasoningService,
        selector: Optional[CandidateSelector] = None,
        narrator: str = settings.NARRATOR_NAME,
        style: Optional[str] = settings.NARRATIVE_STYLE,
    ):
        self.reasoning = reasoning
        self.selector = selector or CandidateSelector(reasoning)
        self.narrator = narrator
        self.style = style

    async def generate(
        self, pois: Sequence[PointOfInterest], history: Optional[List[Message]] = None
    ) -> StoryResponse:
        if not pois:
            raise ValueError("generate() requires at least one point of interest")
        history = history or []

        try:
            selected = await self.selector.select(pois)
            next_destination = selected[0]
            prompt = build_story_prompt(selected, history, self.narrator, self.style)
            story = await self.reasoning.complete(prompt)
            return StoryResponse(
                selected_pois=selected,
                story=story,
                next_destination=next_destination,
            )
        except Exception as e:
            logger.error(f"Story generation failed, using templated narrative: {e}")
            return fallback_story(pois, history)
