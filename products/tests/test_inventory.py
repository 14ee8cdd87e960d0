from django.test import TestCase

from tests.factories import make_product
from products.exceptions import InsufficientStock
from products.inventory import get_stock, lock_products, release_stock, reserve_stock
from products.models import ProductSize


class InventoryTests(TestCase):
    def test_reserve(self):
        product = make_product(stock=5)
        reserve_stock(product, 3)
        self.assertEqual(get_stock(product), 2)

    def test_reserve_exact_stock(self):
        product = make_product(stock=2)
        reserve_stock(product, 2)
        self.assertEqual(get_stock(product), 0)

    def test_reserve_more_than_available(self):
        product = make_product(name='Lamp', stock=1)
        with self.assertRaises(InsufficientStock) as ctx:
            reserve_stock(product, 2)
        self.assertIn('Lamp', ctx.exception.message)
        self.assertEqual(ctx.exception.code, 'insufficient_stock')
        self.assertEqual(get_stock(product), 1)

    def test_sized_stock(self):
        product = make_product(stock=0, sizes={'S': 1, 'M': 4})
        reserve_stock(product, 4, 'M')
        self.assertEqual(get_stock(product, 'M'), 0)
        self.assertEqual(get_stock(product, 'S'), 1)
        with self.assertRaises(InsufficientStock):
            reserve_stock(product, 1, 'M')

    def test_unknown_size_has_no_stock(self):
        product = make_product(sizes={'S': 1})
        self.assertEqual(get_stock(product, 'XL'), 0)
        with self.assertRaises(InsufficientStock):
            reserve_stock(product, 1, 'XL')

    def test_release(self):
        product = make_product(stock=1, sizes=None)
        release_stock(product, 4)
        self.assertEqual(get_stock(product), 5)

        sized = make_product(name='Cap', sizes={'M': 0})
        release_stock(sized, 2, 'M')
        self.assertEqual(ProductSize.objects.get(product=sized).stock, 2)

    def test_lock_products(self):
        first, second = make_product(name='A'), make_product(name='B')
        locked = lock_products([second.pk, first.pk, 999])
        self.assertEqual(set(locked), {first.pk, second.pk})
        self.assertEqual(locked[first.pk].name, 'A')
