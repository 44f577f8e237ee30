from typing import Any, Iterator, Mapping

from kotoba.state import AppState


APP_KEY = "app"


class ExecutionContext(Mapping):
    """Per-request query context

    hiku passes it to resolvers decorated with
    :py:func:`hiku.engine.pass_context`, where the shared state is available
    as ``ctx["app"]``. The context only references the state, it is never
    stored after the request completes.
    """

    def __init__(self, app: AppState) -> None:
        self.__app = app

    @property
    def app(self) -> AppState:
        return self.__app

    def __len__(self) -> int:
        return 1

    def __iter__(self) -> Iterator[str]:
        return iter((APP_KEY,))

    def __getitem__(self, item: Any) -> Any:
        if item == APP_KEY:
            return self.__app
        raise KeyError(item)

    def __repr__(self) -> str:
        return "<{} app={!r}>".format(type(self).__name__, self.__app.name)
