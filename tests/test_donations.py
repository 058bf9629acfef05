from decimal import Decimal

import pytest

from solidaria.core.exceptions import IngredientNotFound, KermesseNotFound, ValidationError
from solidaria.models import IngredientDonation
from solidaria.services.donations import ingredient_progress, record_donation


def test_donations_accumulate(db, kermesse, buyer, make_ingredient):
    flour = make_ingredient(kermesse, "10.0", name="Flour", unit="kg")

    record_donation(db, flour.id, buyer.id, Decimal("4.0"))
    record_donation(db, flour.id, buyer.id, Decimal("4.0"))

    progress = ingredient_progress(db, kermesse.id)

    assert len(progress) == 1
    assert progress[0].name == "Flour"
    assert progress[0].unit == "kg"
    assert progress[0].quantity_needed == Decimal("10.0")
    assert progress[0].quantity_donated == Decimal("8.0")


def test_each_donation_is_its_own_row(db, kermesse, buyer, make_user, make_ingredient):
    oil = make_ingredient(kermesse, "5", name="Oil", unit="l")
    neighbour = make_user("neighbour")

    first = record_donation(db, oil.id, buyer.id, Decimal("1.5"))
    second = record_donation(db, oil.id, buyer.id, Decimal("0.25"))
    third = record_donation(db, oil.id, neighbour.id, 2)

    assert len({first.id, second.id, third.id}) == 3
    assert db.query(IngredientDonation).filter(IngredientDonation.user_id == buyer.id).count() == 2
    assert ingredient_progress(db, kermesse.id)[0].quantity_donated == Decimal("3.75")


def test_ingredient_without_donations_reports_zero(db, kermesse, buyer, make_ingredient):
    rice = make_ingredient(kermesse, "3", name="Rice")
    sugar = make_ingredient(kermesse, "2", name="Sugar")
    record_donation(db, sugar.id, buyer.id, Decimal("1"))

    progress = {p.ingredient_id: p.quantity_donated for p in ingredient_progress(db, kermesse.id)}

    assert progress == {rice.id: Decimal("0"), sugar.id: Decimal("1")}


def test_progress_ignores_other_kermesses(db, kermesse, organizer, buyer, make_kermesse, make_ingredient):
    other = make_kermesse(organizer, name="Other")
    rice_here = make_ingredient(kermesse, "3")
    rice_there = make_ingredient(other, "3")
    record_donation(db, rice_there.id, buyer.id, Decimal("2"))

    progress = ingredient_progress(db, kermesse.id)

    assert [(p.ingredient_id, p.quantity_donated) for p in progress] == [(rice_here.id, Decimal("0"))]


def test_unknown_ingredient(db, buyer):
    with pytest.raises(IngredientNotFound):
        record_donation(db, 404, buyer.id, Decimal("1"))


def test_unknown_kermesse_progress(db):
    with pytest.raises(KermesseNotFound):
        ingredient_progress(db, 404)


@pytest.mark.parametrize(
    "quantity",
    [
        Decimal("0"),
        Decimal("-2.5"),
        1.5,
        Decimal("NaN"),
        True,
        Decimal("0.0004"),
        Decimal("1.2345"),
        Decimal("1000000000"),
    ],
)
def test_invalid_quantities_are_rejected(db, kermesse, buyer, make_ingredient, quantity):
    ingredient = make_ingredient(kermesse, "10")

    with pytest.raises(ValidationError):
        record_donation(db, ingredient.id, buyer.id, quantity)

    assert db.query(IngredientDonation).count() == 0


def test_trailing_zeros_do_not_count_as_extra_places(db, kermesse, buyer, make_ingredient):
    ingredient = make_ingredient(kermesse, "10")

    donation = record_donation(db, ingredient.id, buyer.id, Decimal("2.500000"))

    assert donation.quantity_donated == Decimal("2.5")
    assert ingredient_progress(db, kermesse.id)[0].quantity_donated == Decimal("2.5")
