from setuptools import setup, find_packages

setup(
    name="molsimkit",
    version="0.1.0",
    description="Molecular simulation trajectory analysis: frame iteration, reweighting and secondary structure maps",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "numpy",
        "matplotlib",
        "pyyaml",
        "tqdm",
        "ovito",
        "MDAnalysis>=2.8.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'molsimkit=molsimkit.cli:main',
        ],
    },
    python_requires=">=3.9",
)
