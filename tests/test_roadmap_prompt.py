from roadmap_api.services.roadmap_prompt import build_prompt


def test_goal_embedded_verbatim():
    goal = 'Стать "backend" разработчиком {за год}'
    prompt = build_prompt(goal)

    assert prompt.startswith(
        f"Create a comprehensive and detailed roadmap for achieving the goal: {goal}\n"
    )


def test_prompt_is_deterministic():
    assert build_prompt("Learn Rust") == build_prompt("Learn Rust")


def test_prompt_describes_schema_and_level_targets():
    prompt = build_prompt("Learn Rust")

    for field in ('"title"', '"nodes"', '"timeEstimate"', '"children"', '"resources"'):
        assert field in prompt
    assert "- 1 node at level 0" in prompt
    assert "- 4-6 nodes at level 1" in prompt
    assert "- 12-18 nodes at level 2" in prompt
    assert "- 12-20 nodes at level 3" in prompt
    assert "- 2-10 nodes at level 4" in prompt
    assert "Array of 2-4 HIGH-QUALITY learning resources" in prompt
    assert "SAME LANGUAGE" in prompt
    assert "Return ONLY clean JSON" in prompt
