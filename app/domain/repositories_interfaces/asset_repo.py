from abc import ABC, abstractmethod


class AssetRepoInterface(ABC):
    @abstractmethod
    async def get(self, key: str) -> str:
        raise NotImplementedError
