from setuptools import setup


setup(
    name="bulletin-finder",
    version="0.3.0",
    description="Search court bulletin spreadsheets and export picked rows with their court and state context",
    packages=["bulletin_finder"],
    include_package_data=True,
    install_requires=[
        "pandas",
        "chardet",
        "openpyxl",
        "streamlit",
    ],
    extras_require={
        "excel-legacy": ["xlrd"],
        "ods": ["odfpy"],
        "all": ["xlrd", "odfpy"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "bulletin-finder=bulletin_finder.cli:main",
        ]
    },
)
