import os

import setuptools

setuptools.setup(
    name="triwidgets",
    version="0.1.0",
    author="Gustavo Ramos Rehermann",
    author_email="rehermann6046@gmail.com",
    license="COIL",
    description="Trio-based interactive reaction widgets for chat bots. Ships with a Discord session.",
    long_description=open(os.path.join(os.path.dirname(__file__), "description.md")).read(),
    long_description_content_type="text/markdown",
    keywords="bot discord widgets reactions async trio",
    install_requires=open(os.path.join(os.path.dirname(__file__), "requirements.txt"))
    .read()
    .strip()
    .split("\n"),
    extras_require={"test": ["pytest", "pytest-trio"]},
    python_requires=">=3.9",
    packages=["triwidgets", "triwidgets.backends"],
    classifiers=[
        "Framework :: Trio",
        "Topic :: Communications :: Chat",
        "Topic :: Software Development :: Libraries",
    ],
)
