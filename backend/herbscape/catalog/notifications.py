"""Toast queue shared by the components of one catalog page."""

from typing import List, Optional

from herbscape.schemas.herb import Toast


class Notifier:
    """Collects toasts until the next render drains them."""

    def __init__(self):
        self._queue: List[Toast] = []

    def toast(self, title: str, description: Optional[str] = None, variant: str = "default") -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self._queue.append(toast)
        return toast

    def error(self, title: str, description: Optional[str] = None) -> Toast:
        return self.toast(title, description, variant="destructive")

    @property
    def pending(self) -> List[Toast]:
        return list(self._queue)

    def drain(self) -> List[Toast]:
        toasts, self._queue = self._queue, []
        return toasts
