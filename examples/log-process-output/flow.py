import sys

from prefect import flow, get_run_logger

from prefect_logwriter.deployments.steps.run import run_logged_process
from prefect_logwriter.utils.redirect import redirect_stdout


@flow
async def logged_flow(command: str = f"{sys.executable} --version"):
    logger = get_run_logger()

    with redirect_stdout(logger):
        print(f"Running {command}")

    return await run_logged_process(command, logger_name="prefect.flow_runs")

if __name__ == "__main__":
    import asyncio

    asyncio.run(logged_flow())
