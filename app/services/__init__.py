"""
Services.

Business logic layer. Import services from their modules directly; the
package itself stays import-free so submodules can depend on each other
without cycles.
"""
