# Internal
from asyncio import run, sleep

# External
from vow import create_deferred


async def download(deferred, chunks):
    received = 0
    for size in chunks:
        await sleep(0.05)
        received += size
        deferred.notify(received)

    deferred.resolve(received)


async def main():
    d = create_deferred()
    p = d.promise.chain(
        lambda total: print(f"done, {total} bytes"),
        None,
        lambda received: print(f"{received} bytes so far"),
    )

    await download(d, [512, 1024, 256])
    await p


run(main())
