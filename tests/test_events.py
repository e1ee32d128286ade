from beautycare.core.events import LANGUAGE_CHANGED, EventBus, LanguageChanged


async def test_emit_reaches_sync_and_async_listeners():
    bus = EventBus()
    seen = []

    def on_sync(event):
        seen.append(("sync", event.language))

    async def on_async(event):
        seen.append(("async", event.language))

    bus.subscribe(LANGUAGE_CHANGED, on_sync)
    bus.subscribe(LANGUAGE_CHANGED, on_async)
    bus.subscribe(LANGUAGE_CHANGED, on_sync)

    assert await bus.emit(LANGUAGE_CHANGED, LanguageChanged("he")) == 2
    assert seen == [("sync", "he"), ("async", "he")]


async def test_failing_listener_does_not_stop_others():
    bus = EventBus()
    seen = []

    def broken(event):
        raise RuntimeError("catalog renderer crashed")

    bus.subscribe(LANGUAGE_CHANGED, broken)
    bus.subscribe(LANGUAGE_CHANGED, lambda e: seen.append(e.language))

    assert await bus.emit(LANGUAGE_CHANGED, LanguageChanged("en")) == 1
    assert seen == ["en"]


async def test_unsubscribe():
    bus = EventBus()
    seen = []
    listener = seen.append
    bus.subscribe(LANGUAGE_CHANGED, listener)
    bus.unsubscribe(LANGUAGE_CHANGED, listener)
    bus.unsubscribe(LANGUAGE_CHANGED, listener)
    await bus.emit(LANGUAGE_CHANGED, LanguageChanged("en"))
    assert seen == []
