from people_repo.walkthrough import run_walkthrough


async def test_walkthrough_runs_every_step_and_cleans_up(repo):
    results = await run_walkthrough(repo)

    assert results["create"].favorite_foods == ["Pizza", "Ice Cream"]
    assert len(results["create_many"]) == 3
    assert [person.name for person in results["find_by_name"]] == ["Spock"]
    assert results["find_one_by_favorite_food"].name == "Spock"
    assert results["find_by_id"] == results["create"]
    assert results["add_favorite_food_and_save"].favorite_foods == ["Pizza", "Ice Cream", "hamburger"]
    assert results["set_age_by_name"].age == 20
    assert results["set_age_by_name"].favorite_foods == ["Pizza", "Ice Cream", "hamburger"]
    assert [person.name for person in results["query_favorite_food"]] == ["Spock"]
    assert results["query_favorite_food"][0].age is None
    assert results["remove_by_id"].id == results["create"].id
    assert results["remove_all_by_name"].deleted_count == 1
    assert await repo.count() == 0


async def test_walkthrough_keep_leaves_records(repo):
    results = await run_walkthrough(repo, keep=True)

    assert "remove_by_id" not in results
    assert await repo.count() == 4
