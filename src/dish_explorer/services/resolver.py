"""Identity resolution between the local dataset and the remote catalog."""

from dataclasses import dataclass

from dish_explorer.domain.dishes import LocalDish, RemoteFetchRequest
from dish_explorer.services.local_dataset import LocalDataset


@dataclass
class IdentityResolver:
    """Decide which source is authoritative for a dish id.

    A local hit always wins; the remote catalog is never consulted for ids the
    local dataset knows.
    """

    dataset: LocalDataset

    def resolve(self, dish_id: str) -> LocalDish | RemoteFetchRequest:
        """Return the local dish or a request to fetch it remotely."""
        local = self.dataset.get_dish_by_id(dish_id)
        if local is not None:
            return local
        return RemoteFetchRequest(dish_id=dish_id)
