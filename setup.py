from setuptools import setup, find_packages

setup(
    name="watersense",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"watersense": ["data/*.json"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "python-json-logger>=3.1",
        "python-dotenv",
        "pandas",
        "flask",
        "flask-restful"
    ],
    extras_require={
        "test": ["pytest"]
    }
)
