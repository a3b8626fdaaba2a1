"""Registry queries used to fetch a graph's schema."""

# Wrapped types (lists, non-nulls) are at most seven levels deep in the
# registry's introspection format.
TYPE_REF_DEPTH = 7


def _type_ref_fragment(depth: int = TYPE_REF_DEPTH) -> str:
    inner = "kind\n    name"
    for _ in range(depth):
        inner = f"kind\n    name\n    ofType {{\n    {inner}\n    }}"
    return f"fragment TypeRef on IntrospectionType {{\n    {inner}\n}}"


INTROSPECTION_QUERY = (
    """
query Introspective($graph: ID!, $variant: String, $hash: ID) {
  service(id: $graph) {
    schema(tag: $variant, hash: $hash) {
      introspection {
        queryType { name }
        mutationType { name }
        subscriptionType { name }
        types { ...FullType }
        directives {
          name
          locations
          args { ...InputValue }
        }
      }
    }
  }
}

fragment FullType on IntrospectionType {
  kind
  name
  fields {
    name
    args { ...InputValue }
    type { ...TypeRef }
    isDeprecated
    deprecationReason
  }
  inputFields { ...InputValue }
  interfaces { ...TypeRef }
  enumValues(includeDeprecated: true) {
    name
    isDeprecated
    deprecationReason
  }
  possibleTypes { ...TypeRef }
}

fragment InputValue on IntrospectionInputValue {
  name
  type { ...TypeRef }
  defaultValue
}

"""
    + _type_ref_fragment()
    + "\n"
)

DOCUMENT_QUERY = """
query SchemaDocument($graph: ID!, $variant: String, $hash: ID) {
  service(id: $graph) {
    schema(tag: $variant, hash: $hash) {
      document
    }
  }
}
"""
