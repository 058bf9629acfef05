# Import every model so relationship() names resolve and the
# metadata is complete for create_all / alembic autogenerate.

from solidaria.models.users import User
from solidaria.models.kermesses import Kermesse
from solidaria.models.dishes import Dish
from solidaria.models.ingredients import Ingredient
from solidaria.models.ingredient_donations import IngredientDonation
from solidaria.models.collaborators import Collaborator
from solidaria.models.sales import Sale
from solidaria.models.sale_items import SaleItem

__all__ = [
    "User",
    "Kermesse",
    "Dish",
    "Ingredient",
    "IngredientDonation",
    "Collaborator",
    "Sale",
    "SaleItem",
]
