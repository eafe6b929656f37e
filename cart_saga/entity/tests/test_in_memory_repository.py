from unittest import IsolatedAsyncioTestCase

from cart_saga.entity.repositories.in_memory_repository import InMemoryCartRepository


class InMemoryCartRepositoryTestCase(IsolatedAsyncioTestCase):

    async def test_get_missing(self):
        self.assertIsNone(await InMemoryCartRepository().get(1))

    async def test_saved_state_is_copied(self):
        repository = InMemoryCartRepository()
        state = {'items': [{'name': 'apple'}]}
        await repository.save(1, state)
        state['items'].append({'name': 'pear'})

        loaded = await repository.get(1)
        loaded['items'].clear()

        self.assertEqual(await repository.get(1), {'items': [{'name': 'apple'}]})
