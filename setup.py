from setuptools import setup

def main():
    setup(name="densemat",
          version="1.0.0",
          description="Dense matrix implementation",
          author="rockrid3r",
          author_email="rockrid3r@outlook.com",
          packages=["densemat"],
          python_requires=">=3.8",
          install_requires=[
            "numpy",
          ],
          extras_require={
            "test": ["pytest"],
          },
    )

if __name__ == "__main__":
    main()
