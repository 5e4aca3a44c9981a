from setuptools import find_packages, setup

setup(
    name="sexpreader",
    version="0.1",
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    license="MIT License",
    description="A reader for S-expressions with positioned syntax errors",
    install_requires=[
        "attrs>=22.2.0",
        "pygments>=2.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
