"""Tests for Cart class."""

import unittest

from cart_saga.cart.cart import Cart
from cart_saga.cart.errors import InvalidArgument
from cart_saga.cart.line_item import LineItem


class CartAddItemTestCase(unittest.TestCase):
    """Test cases for Cart.add_item()."""

    def test_new_cart_is_empty(self):
        cart = Cart(1)
        self.assertTrue(cart.is_empty)
        self.assertFalse(cart.is_dirty)
        self.assertEqual(cart.snapshot(), [])

    def test_add_item_appends_in_order(self):
        cart = Cart(1)
        cart.add_item(LineItem("apple"))
        cart.add_item(LineItem("pear"))
        cart.add_item(LineItem("apple"))

        self.assertEqual(cart.snapshot(), [LineItem("apple"), LineItem("pear"), LineItem("apple")])
        self.assertFalse(cart.is_empty)
        self.assertTrue(cart.is_dirty)

    def test_add_none_raises_invalid_argument(self):
        cart = Cart(1)
        with self.assertRaises(InvalidArgument):
            cart.add_item(None)
        self.assertTrue(cart.is_empty)
        self.assertFalse(cart.is_dirty)

    def test_add_unnamed_item_raises_invalid_argument(self):
        cart = Cart(1)
        for name in ("", "   ", None):
            with self.subTest(name=name):
                with self.assertRaises(InvalidArgument):
                    cart.add_item(LineItem(name))
        self.assertTrue(cart.is_empty)

    def test_invalid_argument_is_value_error(self):
        with self.assertRaises(ValueError):
            Cart(1).add_item(LineItem(""))


class CartRemoveItemTestCase(unittest.TestCase):
    """Test cases for Cart.remove_item()."""

    def test_remove_first_match_only(self):
        cart = Cart(1, [LineItem("apple"), LineItem("pear"), LineItem("apple")])

        removed = cart.remove_item(LineItem("apple"))

        self.assertTrue(removed)
        self.assertEqual(cart.snapshot(), [LineItem("pear"), LineItem("apple")])
        self.assertTrue(cart.is_dirty)

    def test_remove_absent_returns_false(self):
        cart = Cart(1, [LineItem("pear")])

        removed = cart.remove_item(LineItem("apple"))

        self.assertFalse(removed)
        self.assertEqual(cart.snapshot(), [LineItem("pear")])
        self.assertFalse(cart.is_dirty)

    def test_adds_minus_removes_keep_add_order(self):
        cart = Cart(1)
        for name in ("a", "b", "c", "b", "a"):
            cart.add_item(LineItem(name))
        cart.remove_item(LineItem("b"))
        cart.remove_item(LineItem("a"))
        cart.remove_item(LineItem("z"))

        self.assertEqual([i.name for i in cart.snapshot()], ["c", "b", "a"])


class CartSnapshotTestCase(unittest.TestCase):

    def test_snapshot_is_not_affected_by_later_mutation(self):
        cart = Cart(1, [LineItem("apple")])
        snapshot = cart.snapshot()

        cart.add_item(LineItem("pear"))
        cart.clear()

        self.assertEqual(snapshot, [LineItem("apple")])

    def test_mutating_snapshot_does_not_affect_cart(self):
        cart = Cart(1, [LineItem("apple")])
        snapshot = cart.snapshot()

        snapshot.append(LineItem("pear"))
        snapshot.clear()

        self.assertEqual(cart.snapshot(), [LineItem("apple")])

    def test_initial_items_are_copied(self):
        items = [LineItem("apple")]
        cart = Cart(1, items)
        items.append(LineItem("pear"))
        self.assertEqual(len(cart), 1)


class CartClearTestCase(unittest.TestCase):

    def test_clear(self):
        cart = Cart(1, [LineItem("apple"), LineItem("pear")])
        cart.clear()
        self.assertTrue(cart.is_empty)
        self.assertTrue(cart.is_dirty)

    def test_clear_empty_cart_is_not_a_change(self):
        cart = Cart(1)
        cart.clear()
        self.assertFalse(cart.is_dirty)

    def test_mark_clean(self):
        cart = Cart(1)
        cart.add_item(LineItem("apple"))
        cart.mark_clean()
        self.assertFalse(cart.is_dirty)


class CartPersistenceTestCase(unittest.TestCase):

    def test_export(self):
        cart = Cart(7, [LineItem("apple"), LineItem("pear")])
        self.assertEqual(cart.export(), {'items': [{'name': 'apple'}, {'name': 'pear'}]})

    def test_restore(self):
        cart = Cart.restore(7, {'items': [{'name': 'apple'}, {'name': 'pear'}]})
        self.assertEqual(cart.id, 7)
        self.assertEqual(cart.snapshot(), [LineItem("apple"), LineItem("pear")])
        self.assertFalse(cart.is_dirty)

    def test_restore_missing_record_is_empty_cart(self):
        cart = Cart.restore(7, None)
        self.assertEqual(cart.id, 7)
        self.assertTrue(cart.is_empty)
