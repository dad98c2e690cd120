from setuptools import setup, find_packages

setup(
    name="PredPreyField",
    version="0.1",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"predpreyfield.ecology": ["field_config.json"]},
    description="Discrete-time predator-prey gridworld: aging, breeding, hunting and starvation on a double-buffered field.",
    author="P. van Doesburg",
    author_email="petervandoesburg11@gmail.com",
    url="https://github.com/doesburg11/predpreygrass",
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pygame",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "predpreyfield=predpreyfield.ecology.run:main",
        ],
    },
)
