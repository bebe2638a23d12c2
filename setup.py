from setuptools import setup, find_packages

setup(
    name="procmem",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'procmem': ['utils/templates/*.j2'],
    },
    # Python entry point
    entry_points={
        'console_scripts': [
            'procmem=procmem.cli:main',
        ],
    },
    install_requires=[
        "Jinja2>=3.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.9",
    author="procmem",
    description="Per-process memory map breakdown from /proc/<pid>/smaps",
)
