# Internal
from asyncio import run, sleep, get_running_loop

# External
from vow import Promise, race, create_deferred


def timer(delay, reason):
    d = create_deferred()
    get_running_loop().call_later(delay, d.reject, reason)
    return d.promise


async def fetch():
    await sleep(0.5)
    return "Did you know: promises settle exactly once"


async def main():
    p = (
        race([Promise.wrap(fetch()), timer(0.1, TimeoutError("fetch took too long"))])
        .catch(
            # In case the request times out, continues with a fallback text
            lambda exc: f"No trivia today ({exc})"
        )
        .then(print)
    )

    await p


run(main())
