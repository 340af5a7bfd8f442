from setuptools import setup

setup(
    name="dfa-workbench",
    version="0.1.0",
    description="Build deterministic finite automata, trace string evaluation and sample their language.",
    packages=["dfa_workbench"],
    py_modules=["main"],
    python_requires=">=3.9",
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["dfa-workbench=dfa_workbench.cli:run"]},
)
