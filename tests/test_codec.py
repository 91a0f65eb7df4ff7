"""Unit tests for the meal display-name codec."""

import pytest

from pos_register.codec import (
    Meal,
    MealKind,
    SimpleItem,
    decode,
    encode,
    is_reserved_name,
    meal_kind_of,
    parse,
)
from pos_register.errors import InvalidSelection


class TestEncode:
    """Test suite for rendering meals as display names."""

    def test_bowl_display_name(self) -> None:
        assert encode(MealKind.BOWL, "Fried Rice", ["Orange Chicken"]) == "Bowl (Fried Rice, Orange Chicken)"

    def test_bigger_plate_keeps_entree_order(self) -> None:
        name = encode(MealKind.BIGGER_PLATE, "Chow Mein", ["Broccoli Beef", "Orange Chicken", "Broccoli Beef"])

        assert name == "Bigger Plate (Chow Mein, Broccoli Beef, Orange Chicken, Broccoli Beef)"

    @pytest.mark.parametrize(
        ("kind", "entrees"),
        [
            (MealKind.BOWL, []),
            (MealKind.BOWL, ["Orange Chicken", "Broccoli Beef"]),
            (MealKind.PLATE, ["Orange Chicken"]),
            (MealKind.BIGGER_PLATE, ["Orange Chicken", "Broccoli Beef"]),
        ],
    )
    def test_wrong_entree_count_is_rejected(self, kind: MealKind, entrees: list[str]) -> None:
        with pytest.raises(InvalidSelection):
            encode(kind, "Fried Rice", entrees)

    def test_component_names_with_separator_are_rejected(self) -> None:
        with pytest.raises(InvalidSelection):
            Meal(MealKind.BOWL, "Rice, Extra", ("Orange Chicken",))

    def test_blank_component_is_rejected(self) -> None:
        with pytest.raises(InvalidSelection):
            Meal(MealKind.BOWL, "  ", ("Orange Chicken",))


class TestDecode:
    """Test suite for reading display names back."""

    @pytest.mark.parametrize(
        ("kind", "base", "entrees"),
        [
            (MealKind.BOWL, "Fried Rice", ("Orange Chicken",)),
            (MealKind.PLATE, "Super Greens", ("Kung Pao Chicken", "Orange Chicken")),
            (MealKind.BIGGER_PLATE, "White Steamed Rice", ("Honey Walnut Shrimp",) * 3),
        ],
    )
    def test_round_trip_per_meal_kind(self, kind: MealKind, base: str, entrees: tuple[str, ...]) -> None:
        display_name = encode(kind, base, entrees)

        assert decode(display_name) == [base, *entrees]
        assert parse(display_name) == Meal(kind, base, entrees)

    def test_bare_name_decodes_to_itself(self) -> None:
        assert decode("Veggie Spring Roll") == ["Veggie Spring Roll"]
        assert parse("Veggie Spring Roll") == SimpleItem("Veggie Spring Roll")

    def test_name_containing_parenthesis_is_not_a_meal(self) -> None:
        assert meal_kind_of("Soda (Large)") is None
        assert decode("Soda (Large)") == ["Soda (Large)"]

    def test_bigger_plate_is_not_read_as_plate(self) -> None:
        assert meal_kind_of("Bigger Plate (Chow Mein, A, B, C)") is MealKind.BIGGER_PLATE
        assert meal_kind_of("Plate (Chow Mein, A, B)") is MealKind.PLATE

    def test_unterminated_meal_name_is_rejected(self) -> None:
        with pytest.raises(InvalidSelection):
            parse("Bowl (Fried Rice, Orange Chicken")

    def test_parse_rejects_wrong_arity(self) -> None:
        with pytest.raises(InvalidSelection):
            parse("Plate (Fried Rice, Orange Chicken)")


class TestSelections:
    """Test suite for selection identity."""

    def test_meals_with_same_components_are_equal_and_hashable(self) -> None:
        first = Meal(MealKind.PLATE, "Chow Mein", ["Orange Chicken", "Broccoli Beef"])
        second = Meal(MealKind.PLATE, "Chow Mein", ("Orange Chicken", "Broccoli Beef"))

        assert first == second
        assert hash(first) == hash(second)

    def test_entree_order_is_part_of_identity(self) -> None:
        first = Meal(MealKind.PLATE, "Chow Mein", ("Orange Chicken", "Broccoli Beef"))
        second = Meal(MealKind.PLATE, "Chow Mein", ("Broccoli Beef", "Orange Chicken"))

        assert first != second

    def test_meal_components_exclude_the_meal_label(self) -> None:
        meal = Meal(MealKind.BOWL, "Fried Rice", ("Orange Chicken",))

        assert meal.components() == ["Fried Rice", "Orange Chicken"]
        assert SimpleItem("Bottled Water").components() == ["Bottled Water"]

    def test_from_label(self) -> None:
        assert MealKind.from_label("Bigger Plate") is MealKind.BIGGER_PLATE
        with pytest.raises(InvalidSelection):
            MealKind.from_label("Family Meal")


class TestReservedNames:
    """Menu names that would be read back as meals."""

    @pytest.mark.parametrize("name", ["Bowl (Special)", "Plate (Kids)", "Bigger Plate (x)"])
    def test_meal_prefixed_names_are_reserved(self, name: str) -> None:
        assert is_reserved_name(name)

    @pytest.mark.parametrize("name", ["Bowl", "Plate", "Fried Rice", "Bowling Snack"])
    def test_ordinary_names_are_not_reserved(self, name: str) -> None:
        assert not is_reserved_name(name)
