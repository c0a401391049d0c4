# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create .venv with uv and install esplight with test and dev extras."""
    ctx.run("uv sync --all-extras")


@task
def lint(ctx):
    """
    Static checks: ruff lint and format check, then mypy over the package.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=esplight --cov-report=term-missing", pty=True)


@task
def build_package(ctx):
    """
    Build sdist and wheel into dist/.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")
