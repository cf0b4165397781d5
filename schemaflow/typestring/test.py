"""Unit tests for the type-string codec."""

import pytest

from schemaflow.schema import SchemaKind
from schemaflow.typestring import (
    Compound,
    Constructor,
    KindTag,
    LiteralValue,
    TokenType,
    TypeRef,
    TypeStringError,
    encode,
    has_handle,
    iter_references,
    kind_tag,
    parse,
    render_type,
    tokenize,
)

STRING = kind_tag(SchemaKind.STRING)
NUMBER = kind_tag(SchemaKind.NUMBER)


def array(arg):
    return Compound(Constructor.ARRAY, (arg,))


def union(*args):
    return Compound(Constructor.UNION, args)


class TestEncode:
    """Tests for canonical encoding."""

    @pytest.mark.unit
    def test_array_of_name(self):
        """Arrays wrap their element."""
        assert encode(array(TypeRef("Product"))) == "Array<Product>"

    @pytest.mark.unit
    def test_listed_constructors(self):
        """Tuples and unions bracket their members."""
        assert encode(Compound(Constructor.TUPLE, (STRING, NUMBER))) == (
            "Tuple<[SchemaString,SchemaNumber]>"
        )
        assert encode(union(STRING, TypeRef("Role"))) == (
            "Union<[SchemaString,Role]>"
        )

    @pytest.mark.unit
    def test_binary_constructors(self):
        """Records and maps carry key and value."""
        assert encode(Compound(Constructor.RECORD, (STRING, NUMBER))) == (
            "Record<SchemaString,SchemaNumber>"
        )
        assert encode(Compound(Constructor.MAP, (STRING, TypeRef("User")))) == (
            "Map<SchemaString,User>"
        )

    @pytest.mark.unit
    def test_literal(self):
        """Literals embed compact JSON."""
        assert encode(LiteralValue("admin")) == 'Literal<"admin">'
        assert encode(LiteralValue(3)) == "Literal<3>"

    @pytest.mark.unit
    def test_punctuated_names_are_quoted(self):
        """Names containing grammar punctuation are JSON strings."""
        assert encode(TypeRef("Page<User>")) == '"Page<User>"'
        assert encode(TypeRef("SchemaString")) == '"SchemaString"'
        assert encode(TypeRef("Order:meta")) == "Order:meta"

    @pytest.mark.unit
    def test_kind_tag(self):
        """Kinds encode as their bare tag."""
        assert kind_tag(SchemaKind.BIGINT) == KindTag("SchemaBigInt")
        assert encode(kind_tag(SchemaKind.DATE)) == "SchemaDate"

    @pytest.mark.unit
    def test_arity_is_checked(self):
        """Constructors with fixed arity reject the wrong argument count."""
        with pytest.raises(ValueError):
            Compound(Constructor.RECORD, (STRING,))


class TestTokenize:
    """Tests for the grammar tokenizer."""

    @pytest.mark.unit
    def test_token_stream(self):
        """Punctuation and identifiers are split."""
        types = [t.type for t in tokenize("Map<SchemaString,User>")]
        assert types == [
            TokenType.IDENT,
            TokenType.LT,
            TokenType.IDENT,
            TokenType.COMMA,
            TokenType.IDENT,
            TokenType.GT,
        ]

    @pytest.mark.unit
    def test_literal_payload_is_one_token(self):
        """Punctuation inside a literal does not split it."""
        tokens = tokenize('Literal<"a>b,c">')
        assert tokens[2].type == TokenType.JSON
        assert tokens[2].value == "a>b,c"

    @pytest.mark.unit
    def test_unterminated_string(self):
        """An unterminated quoted name is reported with its position."""
        with pytest.raises(TypeStringError) as exc_info:
            tokenize('Array<"Page')
        assert exc_info.value.position == 6


class TestParse:
    """Tests for the recursive-descent parser."""

    @pytest.mark.unit
    def test_nested(self):
        """Nested compounds parse into a tree."""
        result = parse("Array<Union<[SchemaString,Product]>>")
        assert result == array(union(STRING, TypeRef("Product")))

    @pytest.mark.unit
    def test_kind_tag_versus_name(self):
        """Bare kind tags and names are distinguished."""
        assert parse("SchemaString") == STRING
        assert parse("Product") == TypeRef("Product")
        assert parse('"SchemaString"') == TypeRef("SchemaString")

    @pytest.mark.unit
    def test_quoted_name_roundtrip(self):
        """Quoted names survive a nested roundtrip."""
        tree = Compound(Constructor.SET, (TypeRef("Page<User>, v2"),))
        assert parse(encode(tree)) == tree

    @pytest.mark.unit
    def test_empty_tuple(self):
        """Empty tuples are allowed."""
        assert parse("Tuple<[]>") == Compound(Constructor.TUPLE, ())

    @pytest.mark.unit
    def test_literal_object(self):
        """Literal payloads may be any JSON value."""
        assert parse('Literal<{"a":[1,2]}>') == LiteralValue({"a": [1, 2]})

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        ["Array<", "Array<A", "Foo<A>", "Tuple<[A,]>", "Record<A>", "A B", ""],
    )
    def test_malformed(self, text):
        """Malformed input raises TypeStringError."""
        with pytest.raises(TypeStringError):
            parse(text)


class TestRenderType:
    """Tests for display rendering."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("encoded", "expected"),
        [
            ("SchemaString", "string"),
            ("SchemaBigInt", "bigint"),
            ("Product", "Product"),
            ("Array<Product>", "Product[]"),
            ("Array<Array<SchemaNumber>>", "number[][]"),
            ("Tuple<[SchemaString,SchemaNumber]>", "[string, number]"),
            ("Union<[SchemaString,SchemaNull]>", "string | null"),
            ("Record<SchemaString,User>", "{ [key: string]: User }"),
            ("Map<SchemaString,Array<User>>", "Map<string, User[]>"),
            ("Set<SchemaDate>", "Set<date>"),
            ('Literal<"admin">', '"admin"'),
            ("Literal<true>", "true"),
            ("Literal<[1,2]>", "[1, 2]"),
            ("Array<Union<[SchemaString,Product]>>", "(string | Product)[]"),
            ('"Page<User>"', "Page<User>"),
        ],
    )
    def test_render(self, encoded, expected):
        """Every compound renders to its display form."""
        assert render_type(encoded) == expected

    @pytest.mark.unit
    def test_render_accepts_tree(self):
        """Trees render without an encode step."""
        assert render_type(array(TypeRef("Product"))) == "Product[]"

    @pytest.mark.unit
    def test_no_residual_tokens(self):
        """Deeply nested kinds leave no kind tags or encoded tokens behind."""
        tree = Compound(
            Constructor.RECORD,
            (
                STRING,
                union(
                    array(Compound(Constructor.TUPLE, (NUMBER, LiteralValue("x")))),
                    Compound(Constructor.SET, (KindTag("SchemaBoolean"),)),
                ),
            ),
        )
        rendered = render_type(encode(tree))
        assert rendered == '{ [key: string]: [number, "x"][] | Set<boolean> }'
        assert "Schema" not in rendered
        for token in ("Array<", "Tuple<", "Union<", "Record<", "Literal<"):
            assert token not in rendered


class TestHandles:
    """Tests for reference discovery."""

    @pytest.mark.unit
    def test_iter_references(self):
        """References are yielded depth first."""
        tree = parse("Map<Key,Union<[SchemaString,Value]>>")
        assert list(iter_references(tree)) == ["Key", "Value"]

    @pytest.mark.unit
    def test_has_handle(self):
        """Only fields referencing known schemas get handles."""
        assert has_handle("Array<Product>", ["Product"])
        assert not has_handle("Array<Product>", ["User"])
        assert has_handle("Order:meta")
        assert not has_handle("SchemaString")
        assert not has_handle('Literal<"Product">', ["Product"])
