"""Invoke tasks for testing, linting, and formatting.

Run tasks with: invoke TASK_NAME

Test Examples:
    invoke test              # Run all tests
    invoke test.tags         # Run tag pagination tests only
    invoke test.coverage     # Generate coverage reports
    invoke test.debug        # Run with debugger on failure

Linting Examples:
    invoke lint.flake8      # Check code style with flake8
    invoke lint.black       # Format code with black
    invoke lint.black-check # Check if code needs formatting
"""

from invoke import Collection, task

PACKAGE = "imagetransports"


@task(help={"verbose": "Show verbose output"})
def test(ctx, verbose=False):
    """Run all tests."""
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    ctx.run(cmd)


@task
def tags(ctx):
    """Run tag listing and pagination tests only."""
    ctx.run("uv run pytest tests/unit/test_tags.py tests/unit/test_docker_image.py")


@task
def transports(ctx):
    """Run transport registry tests only."""
    ctx.run("uv run pytest tests/unit/test_transport_registry.py")


@task(help={"file": "Specific test file to run", "name": "Test name or pattern"})
def specific(ctx, file=None, name=None):
    """Run specific test file, class, or function.

    Examples:
        invoke test.specific --file tests/unit/test_tags.py
        invoke test.specific --file tests/unit/test_tags.py --name TestParseLinkHeader
    """
    if not file and not name:
        print("Error: Please specify --file and/or --name")
        return

    cmd = "uv run pytest"
    if file:
        cmd += f" {file}"
    if name:
        cmd += f"::{name}" if file else f" -k {name}"

    ctx.run(cmd)


@task
def coverage(ctx):
    """Generate all coverage reports (HTML, terminal, and XML)."""
    ctx.run(
        f"uv run pytest --cov={PACKAGE} --cov-report=html "
        "--cov-report=term-missing --cov-report=xml"
    )
    print("\n✓ Coverage reports generated:")
    print("  - htmlcov/index.html (HTML)")
    print("  - Terminal output above")
    print("  - coverage.xml (XML for CI)")


@task
def debug(ctx):
    """Run tests with debugger (pdb) on failure."""
    ctx.run("uv run pytest --pdb")


@task
def debug_logs(ctx):
    """Run tests with debug-level logging."""
    ctx.run("uv run pytest --log-cli-level=DEBUG")


@task
def ci(ctx):
    """Run all tests as if in CI (with XML coverage)."""
    ctx.run(f"uv run pytest --cov={PACKAGE} --cov-report=xml")


# Linting tasks
@task(help={"src": f"Path to check (default: {PACKAGE})"})
def flake8(ctx, src=PACKAGE):
    """Run flake8 style checker."""
    ctx.run(f"uv run flake8 {src}")


@task(help={"check": "Check only, don't modify files"})
def black(ctx, check=False):
    """Format code with black."""
    cmd = f"uv run black {PACKAGE} tests main.py"
    if check:
        cmd += " --check"
    ctx.run(cmd)


@task
def black_check(ctx):
    """Check if code needs black formatting."""
    ctx.run(f"uv run black {PACKAGE} tests main.py --check")


# Namespace for tests
test_ns = Collection("test")
test_ns.add_task(test, default=True)
test_ns.add_task(tags)
test_ns.add_task(transports)
test_ns.add_task(specific)
test_ns.add_task(coverage)
test_ns.add_task(debug)
test_ns.add_task(debug_logs)
test_ns.add_task(ci)

# Namespace for linting
lint_ns = Collection("lint")
lint_ns.add_task(flake8)
lint_ns.add_task(black)
lint_ns.add_task(black_check)

# Register namespaces at module level for invoke to discover
ns = Collection(test_ns, lint_ns)
