"""Mini README: Tests for the depth-bounded search engine.

Exercises the literal delivery scenarios, the search outcomes and the
properties every returned plan must satisfy: the goal holds at the end,
deeper bounds never lose a plan, energy stays within capacity and each
package is in exactly one place. A plain depth-first search without the
failure table or the distance bound serves as the reference for which plan
each strategy must return.
"""

import threading

import pytest

from droneplanner.grounding import ActionGrounder
from droneplanner.search import CancellationToken, SearchEngine, SearchOutcome, SearchStrategy
from droneplanner.state import State, parse_literals
from droneplanner.validation import PlanValidator


def _search(domain, initial, goal, max_depth, **kwargs):
    engine = SearchEngine(domain, strategy=kwargs.pop("strategy", SearchStrategy.ITERATIVE_DEEPENING))
    return engine.search(State.of(parse_literals(initial)), parse_literals(goal), max_depth, **kwargs)


def test_single_move(horn_domain):
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100)]",
        "[at_drone(drone1,crossroad1)]",
        5,
    )
    assert result.outcome is SearchOutcome.FOUND
    assert result.plan.as_strings() == ["move(drone1, warehouse1, crossroad1)"]


def test_delivery_uses_one_pickup_and_one_drop(horn_domain):
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
        "[at_package(pkg1,houseA)]",
        15,
    )
    assert result.solved
    assert result.plan.as_strings() == [
        "pickup(drone1, pkg1, warehouse1)",
        "move(drone1, warehouse1, crossroad1)",
        "move(drone1, crossroad1, houseA)",
        "drop(drone1, pkg1, houseA)",
    ]


def test_recharge_reaches_target_energy(horn_domain, make_domain):
    initial = "[at_drone(drone1,base), energy(drone1,10)]"
    goal = "[energy(drone1,60)]"

    result = _search(horn_domain, initial, goal, 5)
    assert result.plan.as_strings() == ["recharge(drone1)"]

    smaller_steps = make_domain(energy={"move_cost": 5, "recharge_increment": 25})
    result = _search(smaller_steps, initial, goal, 5)
    assert result.plan.as_strings() == ["recharge(drone1)", "recharge(drone1)"]


def test_two_drones_deliver_their_own_packages(horn_domain):
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_drone(drone2,warehouse2), energy(drone2,120), "
        "at_package(pkg1,warehouse1), at_package(pkg2,warehouse2)]",
        "[at_package(pkg1,houseA), at_package(pkg2,houseD)]",
        12,
    )
    assert result.solved
    assert len(result.plan) == 8
    drone1 = [step for step in result.plan if step.drone == "drone1"]
    drone2 = [step for step in result.plan if step.drone == "drone2"]
    assert len(drone1) + len(drone2) == len(result.plan)
    assert all("pkg2" not in step.args for step in drone1)
    assert all("pkg1" not in step.args for step in drone2)
    assert "drop(drone1, pkg1, houseA)" in result.plan.as_strings()
    assert "drop(drone2, pkg2, houseD)" in result.plan.as_strings()


def test_goal_already_satisfied_returns_empty_plan(horn_domain):
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100)]",
        "[at_drone(drone1,warehouse1)]",
        0,
    )
    assert result.solved
    assert len(result.plan) == 0
    assert result.stats.expanded == 0


def test_depth_bound_too_small_reports_depth_exceeded(horn_domain):
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
        "[at_package(pkg1,houseA)]",
        3,
    )
    assert result.outcome is SearchOutcome.DEPTH_EXCEEDED
    assert result.plan is None
    assert not result.solved


def test_unreachable_goal_is_exhausted_early(make_domain):
    domain = make_domain(actions=["move", "pickup", "drop"])
    result = _search(
        domain,
        "[at_drone(drone1,warehouse1), energy(drone1,0)]",
        "[at_drone(drone1,crossroad1)]",
        20,
    )
    assert result.outcome is SearchOutcome.EXHAUSTED
    assert result.plan is None
    assert result.stats.passes < 20


def test_depth_monotonicity(horn_domain):
    initial = "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]"
    goal = "[at_package(pkg1,houseA)]"
    plans = [_search(horn_domain, initial, goal, depth).plan for depth in range(4, 9)]
    assert all(plan is not None for plan in plans)
    assert len({tuple(plan.as_strings()) for plan in plans}) == 1


@pytest.mark.parametrize("strategy", list(SearchStrategy))
def test_plans_satisfy_goal_capacity_and_exclusivity(horn_domain, strategy):
    initial = State.of(parse_literals("[at_drone(drone1,warehouse1), energy(drone1,15), at_package(pkg1,warehouse1)]"))
    goal = parse_literals("[at_package(pkg1,houseA)]")
    result = SearchEngine(horn_domain, strategy=strategy).search(initial, goal, 8)
    assert result.solved

    trace = PlanValidator(horn_domain).simulate(initial, result.plan)
    assert trace.final.satisfies(goal)
    for state in trace.states:
        assert state.invariant_violations() == []
        for fact in state.facts("energy"):
            drone, level = fact.args
            assert 0 <= level <= horn_domain.capacity(drone)


def test_cancelled_token_stops_search(horn_domain):
    token = CancellationToken()
    token.cancel()
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
        "[at_package(pkg1,houseA)]",
        15,
        cancellation=token,
    )
    assert result.outcome is SearchOutcome.CANCELLED
    assert result.plan is None
    assert result.reason == "cancelled by caller"


def test_expansion_limit_cancels_search(horn_domain):
    token = CancellationToken(max_expansions=1)
    result = _search(
        horn_domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
        "[at_package(pkg1,houseA)]",
        15,
        cancellation=token,
    )
    assert result.outcome is SearchOutcome.CANCELLED
    assert "expansion limit" in result.reason


def test_one_engine_serves_concurrent_queries(horn_domain):
    engine = SearchEngine(horn_domain)
    initial = State.of(parse_literals("[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]"))
    goal = parse_literals("[at_package(pkg1,houseA)]")
    results = []

    def worker():
        results.append(engine.search(initial, goal, 10).plan.as_strings())

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(results) == 4
    assert all(plan == results[0] for plan in results)


def test_negative_depth_is_rejected(horn_domain):
    with pytest.raises(ValueError):
        _search(horn_domain, "[]", "[]", -1)


def _plain_first_plan(grounder, state, goal, remaining, path):
    """Depth-first search with no failure table and no distance bound."""

    if state.satisfies(goal):
        return []
    if remaining == 0:
        return None
    for action in grounder.applicable_actions(state):
        successor = action.apply(state)
        if successor in path:
            continue
        rest = _plain_first_plan(grounder, successor, goal, remaining - 1, path | {successor})
        if rest is not None:
            return [str(action)] + rest
    return None


def _plain_search(domain, initial, goal, max_depth, strategy):
    grounder = ActionGrounder(domain)
    bounds = [max_depth] if strategy is SearchStrategy.DEPTH_FIRST else range(max_depth + 1)
    for bound in bounds:
        plan = _plain_first_plan(grounder, initial, goal, bound, frozenset({initial}))
        if plan is not None:
            return plan
    return None


PLAIN_SEARCH_QUERIES = [
    ("[at_drone(drone1,warehouse1), energy(drone1,100)]", "[at_drone(drone1,crossroad1)]", 3),
    ("[at_drone(drone1,crossroad1), energy(drone1,100)]", "[at_drone(drone1,houseA)]", 3),
    ("[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]", "[at_package(pkg1,houseA)]", 5),
    ("[at_drone(drone1,base), energy(drone1,10)]", "[energy(drone1,60)]", 3),
    ("[at_drone(drone1,houseA), energy(drone1,10)]", "[at_drone(drone1,houseC)]", 4),
    (
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_drone(drone2,warehouse2), energy(drone2,120)]",
        "[at_drone(drone1,crossroad1), at_drone(drone2,crossroad4)]",
        3,
    ),
]


@pytest.mark.parametrize("strategy", list(SearchStrategy))
@pytest.mark.parametrize("initial, goal, max_depth", PLAIN_SEARCH_QUERIES)
def test_pruning_never_changes_the_returned_plan(horn_domain, strategy, initial, goal, max_depth):
    start = State.of(parse_literals(initial))
    goal_literals = parse_literals(goal)
    expected = _plain_search(horn_domain, start, goal_literals, max_depth, strategy)

    result = SearchEngine(horn_domain, strategy=strategy).search(start, goal_literals, max_depth)
    if expected is None:
        assert result.plan is None
    else:
        assert result.plan.as_strings() == expected


def test_depth_first_returns_first_plan_in_grounding_order(horn_domain):
    initial = "[at_drone(drone1,crossroad1), energy(drone1,100)]"
    goal = "[at_drone(drone1,houseA)]"

    first = _search(horn_domain, initial, goal, 3, strategy=SearchStrategy.DEPTH_FIRST)
    assert first.plan.as_strings() == [
        "move(drone1, crossroad1, base)",
        "move(drone1, base, crossroad1)",
        "move(drone1, crossroad1, houseA)",
    ]
    assert first.stats.passes == 1

    shortest = _search(horn_domain, initial, goal, 3)
    assert shortest.plan.as_strings() == ["move(drone1, crossroad1, houseA)"]


@pytest.mark.parametrize(
    "initial, goal, max_depth, length",
    [
        ("[at_drone(drone1,warehouse1), energy(drone1,100)]", "[at_drone(drone1,crossroad1)]", 5, 1),
        ("[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]", "[at_package(pkg1,houseA)]", 4, 4),
        ("[at_drone(drone1,base), energy(drone1,10)]", "[energy(drone1,60)]", 1, 1),
        (
            "[at_drone(drone1,warehouse1), energy(drone1,100), at_drone(drone2,warehouse2), energy(drone2,120), "
            "at_package(pkg1,warehouse1), at_package(pkg2,warehouse2)]",
            "[at_package(pkg1,houseA), at_package(pkg2,houseD)]",
            8,
            8,
        ),
    ],
)
def test_delivery_scenarios_under_depth_first(horn_domain, initial, goal, max_depth, length):
    start = State.of(parse_literals(initial))
    goal_literals = parse_literals(goal)
    result = SearchEngine(horn_domain, strategy=SearchStrategy.DEPTH_FIRST).search(start, goal_literals, max_depth)
    assert result.solved
    assert len(result.plan) == length
    final = PlanValidator(horn_domain).validate(start, result.plan, goal_literals)
    assert final.satisfies(goal_literals)


@pytest.mark.parametrize("strategy", list(SearchStrategy))
def test_noop_recharge_is_not_re_entered(make_domain, strategy):
    domain = make_domain(actions=["recharge"])
    result = _search(
        domain,
        "[at_drone(drone1,base), energy(drone1,100)]",
        "[energy(drone1,55)]",
        5,
        strategy=strategy,
    )
    assert result.outcome is SearchOutcome.EXHAUSTED
    assert result.stats.expanded == 1
    assert result.stats.generated == 1
    assert result.stats.pruned == 1


def test_round_trip_back_to_a_path_state_is_pruned(make_domain):
    domain = make_domain(actions=["move", "recharge"])
    result = _search(
        domain,
        "[at_drone(drone1,warehouse1), energy(drone1,100)]",
        "[energy(drone1,53)]",
        4,
        strategy=SearchStrategy.DEPTH_FIRST,
    )
    assert result.plan is None
    assert result.outcome is SearchOutcome.DEPTH_EXCEEDED
    assert result.stats.pruned >= 2


def test_static_goal_facts_are_checked_against_the_map(horn_domain):
    initial = "[at_drone(drone1,warehouse1), energy(drone1,100)]"
    result = _search(horn_domain, initial, "[at_drone(drone1,crossroad1), connected(warehouse1,crossroad1)]", 5)
    assert result.plan.as_strings() == ["move(drone1, warehouse1, crossroad1)"]

    missing_edge = _search(horn_domain, initial, "[at_drone(drone1,crossroad1), connected(warehouse1,houseD)]", 5)
    assert missing_edge.outcome is SearchOutcome.EXHAUSTED
    assert missing_edge.plan is None
