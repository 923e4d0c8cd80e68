"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='typetag',
	version='0.1.0',
	packages=['typetag'],
	entry_points={
		'console_scripts': ["typetag = typetag.cmdline:main"],
	},
	license='MIT',
	description='Best-effort detection of coarse types (string, int, dict, depset) in Starlark build files',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Topic :: Software Development :: Quality Assurance",
		"Topic :: Software Development :: Build Tools",
		"Environment :: Console",
	],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	]
)
