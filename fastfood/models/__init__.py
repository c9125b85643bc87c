from fastfood.models.customer import Customer
from fastfood.models.product import Product
from fastfood.models.order import Order
from fastfood.models.order_item import OrderItem
from fastfood.models.payment import Payment
