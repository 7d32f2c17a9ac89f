"""Replays the CRUD tutorial sequence against a live ``PersonRepository``."""

from __future__ import annotations

from typing import Any

from loguru import logger

from .errors import PersonNotFoundError
from .repository import PersonRepository

CREW = [
    {"name": "Picard", "age": 56, "favoriteFoods": ["Earl Grey Tea"]},
    {"name": "Spock", "age": 34, "favoriteFoods": ["Knowledge"]},
    {"name": "Worf", "age": 32, "favoriteFoods": ["Wriggly Gagh"]},
]


async def run_walkthrough(repo: PersonRepository, *, keep: bool = False) -> dict[str, Any]:
    """Run every tutorial step in order and return what each one produced."""

    results: dict[str, Any] = {}

    me = await repo.create("S Fraser", 102, ["Pizza", "Ice Cream"])
    logger.info("create -> {person}", person=me)
    results["create"] = me

    crew = await repo.create_many(CREW)
    logger.info("create_many -> {count} people", count=len(crew))
    results["create_many"] = crew

    results["find_by_name"] = await repo.find_by_name("Spock")
    logger.info("find_by_name Spock -> {people}", people=results["find_by_name"])

    results["find_one_by_favorite_food"] = await repo.find_one_by_favorite_food("Knowledge")
    logger.info("find_one_by_favorite_food Knowledge -> {person}", person=results["find_one_by_favorite_food"])

    results["find_by_id"] = await repo.find_by_id(me.id)
    logger.info("find_by_id {id} -> {person}", id=me.id, person=results["find_by_id"])

    results["add_favorite_food_and_save"] = await repo.add_favorite_food_and_save(me.id, "hamburger")
    logger.info("add_favorite_food_and_save -> {person}", person=results["add_favorite_food_and_save"])

    results["set_age_by_name"] = await repo.set_age_by_name("S Fraser", 20)
    logger.info("set_age_by_name -> {person}", person=results["set_age_by_name"])

    results["query_favorite_food"] = await repo.query_favorite_food(
        "Knowledge",
        limit=2,
        sort_by_name_ascending=True,
        exclude_age_field=True,
    )
    logger.info("query_favorite_food Knowledge -> {people}", people=results["query_favorite_food"])

    if keep:
        return results

    results["remove_by_id"] = await repo.remove_by_id(me.id)
    logger.info("remove_by_id {id} -> {person}", id=me.id, person=results["remove_by_id"])

    results["remove_all_by_name"] = await repo.remove_all_by_name("Worf")
    logger.info("remove_all_by_name Worf -> {summary}", summary=results["remove_all_by_name"])

    for person in crew:
        if person.name == "Worf":
            continue
        try:
            await repo.remove_by_id(person.id)
        except PersonNotFoundError:
            logger.debug("Walkthrough record {id} already gone", id=person.id)
    return results
