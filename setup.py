from setuptools import setup, find_packages

setup(
    name="owo-cli",
    version="1.1.2",
    description="Natural language to shell commands using LLM providers",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "typer>=0.12.0",
        "prompt_toolkit>=3.0.43",
        "rich>=13.7.0",
        "python-dotenv>=1.0.0",
        "httpx>=0.27.0",
        "openai>=1.40.0",
        "anthropic>=0.34.0",
        "langchain-google-genai>=2.1.1",
    ],
    extras_require={
        "test": ["pytest>=8.0"],
    },
    entry_points={
        "console_scripts": [
            "owo=owo.main:owo",
        ],
    },
    python_requires=">=3.10",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
