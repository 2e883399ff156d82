from setuptools import setup, find_packages

setup(
    name="spooky_connect4",
    version="0.1.0",
    description="Connect Four rules engine with undo and neural-network input encoding",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
