from setuptools import setup, find_packages

setup(
    name="timed-quiz",
    version="0.1.0",
    description="Timed knowledge-assessment engine with a terminal quiz runner",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"timed_quiz": ["banks/*.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "timed-quiz=timed_quiz.runner:main",
        ],
    },
)
